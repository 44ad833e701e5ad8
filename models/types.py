"""Type definitions for the bridge client.

This module provides TypedDict definitions for structured data passed between
modules, improving type safety and IDE autocompletion.
"""

from typing import TypedDict


class BridgeSettings(TypedDict):
    """Resolved connection settings for a bridge."""
    address: str
    key: str
    timeout: float


class RemoteError(TypedDict, total=False):
    """Error object embedded in a bridge write acknowledgement."""
    type: int
    address: str
    description: str
