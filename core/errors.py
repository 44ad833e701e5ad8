"""Exception types raised by the bridge client.

Every error derives from HueError so callers can catch the whole family:
- FormatError: malformed hex colour or enumeration string
- CapabilityError: colour operation on a device without colour support
- NotFoundError / NotTypeError: sensor value lookups
- TransportError: network failure or timeout talking to the bridge
- RemoteValidationError: the bridge rejected a field in a write
- DecodeError: a resource payload is missing a required field
- ConfigError: bridge address or key not configured
"""


class HueError(Exception):
    """Base class for all bridge client errors."""


class FormatError(HueError, ValueError):
    """A hex colour or enumeration string could not be parsed."""


class CapabilityError(HueError):
    """The device does not support the requested operation."""


class NotFoundError(HueError, KeyError):
    """The requested sensor value is not reported by the sensor."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class NotTypeError(HueError, TypeError):
    """The requested sensor value is not of the requested type."""


class ConfigError(HueError):
    """Required connection settings are missing or invalid."""


class DecodeError(HueError):
    """A bridge response could not be decoded into a resource."""


class TransportError(HueError):
    """A request to the bridge failed before a response was read.

    The underlying requests exception is chained as __cause__.
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class RemoteValidationError(HueError):
    """The bridge returned an error object for a request."""

    def __init__(self, address: str, description: str):
        super().__init__(f'error returned from "{address}": {description}')
        self.address = address
        self.description = description
