"""Synchronisation of resource records with the bridge.

A clean record (no pending edits) is refreshed from the bridge. A dirty
record is pushed with at most two partial writes:

1. identity-class edits (name, startup behaviour) to the resource root
2. state-class edits to the resource's state sub-resource (/state,
   /action or /config)

Bits are cleared only after the write that carries them succeeds. There is
no rollback: if the identity write succeeds and the state write fails, the
next update() only sends the remaining state edits.
"""

import structlog

from core.config import DEFAULT_TIMEOUT
from core.errors import DecodeError
from core.transport import fetch_json
from models.record import Record
from models.state import IDENTITY_ATTRIBUTES

logger = structlog.getLogger(__name__)


class Synchronizer:
    """Pushes and pulls records through a transport."""

    def __init__(self, transport, timeout: float = DEFAULT_TIMEOUT):
        self.transport = transport
        self.timeout = timeout

    def sync(self, record: Record, timeout: float | None = None):
        """Synchronise one record; raises on the first failed request."""
        timeout = self.timeout if timeout is None else timeout

        if not record.dirty:
            logger.debug("Refreshing record", path=record.path)
            data = fetch_json(self.transport, 'GET', record.path, timeout=timeout)
            if not isinstance(data, dict):
                raise DecodeError(f'could not decode "{record.path}": expected a JSON object')
            record.load(data)
            return

        if record.dirty & IDENTITY_ATTRIBUTES:
            body = record.identity_payload()
            logger.debug("Pushing identity", path=record.path, attributes=sorted(a.value for a in record.dirty))
            fetch_json(self.transport, 'PUT', record.path, body, timeout=timeout)
            record.dirty -= IDENTITY_ATTRIBUTES
            if not record.dirty:
                return

        body = record.state_payload()
        logger.debug("Pushing state", path=record.state_path, attributes=sorted(a.value for a in record.dirty))
        fetch_json(self.transport, 'PUT', record.state_path, body, timeout=timeout)
        record.dirty.clear()
