"""HTTP transport for the bridge's v1 REST API.

BridgeTransport performs a single blocking request per call. fetch_json()
decodes the response and turns error objects embedded in the bridge's
acknowledgements into RemoteValidationError.
"""

import json

import requests
import structlog
from requests.packages.urllib3.exceptions import InsecureRequestWarning

from core.config import DEFAULT_TIMEOUT
from core.errors import DecodeError, RemoteValidationError, TransportError
from models.types import RemoteError

# Disable SSL warnings for self-signed certificate
requests.packages.urllib3.disable_warnings(InsecureRequestWarning)

logger = structlog.getLogger(__name__)


class BridgeTransport:
    """Sends requests to one bridge over a shared requests session."""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT,
                 session: requests.Session | None = None):
        """Initialise BridgeTransport.

        Args:
            base_url: API root including the access key (see build_api_url)
            timeout: Default seconds allowed per request; <= 0 disables it
            session: Optional pre-configured session
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.verify = False  # Accept self-signed certificate

    def request(self, method: str, path: str, body: dict | None = None,
                timeout: float | None = None) -> bytes:
        """Send a request and return the raw response body.

        Raises:
            TransportError: on connection failure, timeout or HTTP error status
        """
        url = f"{self.base_url}{path}"
        timeout = self.timeout if timeout is None else timeout
        data = json.dumps(body) if body is not None else None

        logger.debug("Bridge request", method=method, path=path, body=body)
        try:
            response = self.session.request(
                method, url, data=data, timeout=timeout if timeout > 0 else None
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            # Log the path only, the URL carries the access key
            logger.debug("Bridge request failed", method=method, path=path, error=str(e))
            raise TransportError(f'could not access "{path}": {e}', url=path) from e
        return response.content


def check_response(raw: bytes):
    """Decode a bridge response, raising for embedded error objects.

    A response is either a plain object (resource or single error) or an
    array of per-field {"success": ...} / {"error": ...} entries. The first
    error wins, even if other fields succeeded.

    Raises:
        DecodeError: if the body is not valid JSON or has unknown entries
        RemoteValidationError: if the bridge reported an error
    """
    if not raw:
        return None
    try:
        result = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise DecodeError(f"could not unmarshal JSON response: {e}") from e

    if isinstance(result, dict):
        if isinstance(result.get('error'), dict) and len(result) == 1:
            raise _remote_error(result['error'])
        return result

    if isinstance(result, list):
        for entry in result:
            if not isinstance(entry, dict):
                raise DecodeError("received an invalid JSON response")
            if 'success' in entry:
                continue
            if not isinstance(entry.get('error'), dict):
                raise DecodeError("received an invalid JSON response")
            raise _remote_error(entry['error'])
    return result


def _remote_error(error: RemoteError) -> RemoteValidationError:
    address = error.get('address', 'unknown URL')
    description = error.get('description', 'unknown error')
    logger.warning("Bridge rejected request", address=address, description=description)
    return RemoteValidationError(address, description)


def fetch_json(transport, method: str, path: str, body: dict | None = None,
               timeout: float | None = None):
    """Send a request through any transport and return the checked JSON."""
    return check_response(transport.request(method, path, body, timeout))
