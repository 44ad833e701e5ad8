"""Base class for bridge resource records.

A record mirrors one remote resource. Local edits are written straight into
the snapshot and flagged in the record's dirty set. Unless the record is in
manual mode, every edit is pushed to the bridge immediately; in manual mode
edits accumulate until update() is called.
"""

from typing import Protocol

from core.errors import DecodeError
from models.state import IDENTITY_ATTRIBUTES, Attribute


class SyncHandle(Protocol):
    """Anything that can synchronise a record with the bridge."""

    def sync(self, record: 'Record', timeout: float | None = None) -> None:
        ...


def require(data: dict, field: str, kind: str = 'resource'):
    """Return data[field], raising DecodeError if it is missing."""
    if not isinstance(data, dict):
        raise DecodeError(f"{kind} payload must be a JSON object")
    if field not in data:
        raise DecodeError(f'missing "{field}" parameter value')
    return data[field]


class Record:
    """A resource mirrored from the bridge, with dirty attribute tracking."""

    # Collection path on the bridge, e.g. 'lights'
    collection = ''
    # Sub-resource that receives state-class writes
    state_section = 'state'

    def __init__(self, record_id: str, sync: SyncHandle, manual: bool = False):
        self.id = record_id
        self.manual = manual
        self.dirty: set[Attribute] = set()
        self._sync = sync
        self._name = ''

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} name={self._name!r}>"

    @property
    def path(self) -> str:
        return f"/{self.collection}/{self.id}"

    @property
    def state_path(self) -> str:
        return f"{self.path}/{self.state_section}"

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_dirty(self) -> bool:
        return bool(self.dirty)

    def set_name(self, name: str):
        """Change the display name of the resource."""
        self._name = name
        self._changed(Attribute.NAME)

    def update(self, timeout: float | None = None):
        """Synchronise the record with the bridge.

        With no pending edits the snapshot is re-fetched; otherwise the
        pending edits are pushed. Raises on failure, leaving unsent edits
        pending.
        """
        self._sync.sync(self, timeout=timeout)

    def discard(self):
        """Drop pending edits. The snapshot keeps its edited values until the next update()."""
        self.dirty.clear()

    def _changed(self, attribute: Attribute):
        self.dirty.add(attribute)
        if self.manual:
            return
        self.update()

    def identity_payload(self) -> dict:
        """Body for the resource root holding pending identity-class edits."""
        body = {}
        if Attribute.NAME in self.dirty:
            body['name'] = self._name
        return body

    def state_payload(self) -> dict:
        """Body for the state sub-resource holding pending state-class edits."""
        raise NotImplementedError

    def state_attributes(self) -> set[Attribute]:
        return self.dirty - IDENTITY_ATTRIBUTES

    def load(self, data: dict):
        """Replace the snapshot in place from a bridge representation."""
        raise NotImplementedError
