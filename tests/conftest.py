"""Pytest configuration and fixtures for bridge client tests."""

import copy
import json

import pytest
import structlog

from core.bridge import Bridge
from core.sync import Synchronizer
from tests.payloads import ALL_GROUP, GROUPS, LIGHTS, SENSORS


class FakeTransport:
    """Records requests and replays canned bridge responses.

    Responses are keyed by (method, path). A value may be any JSON-serialisable
    object or an exception instance to raise. Unknown PUTs are acknowledged
    with a success array; unknown GETs return a 'resource not available' error.
    """

    def __init__(self, responses: dict | None = None):
        self.responses = responses or {}
        self.calls: list[tuple[str, str, dict | None]] = []
        self.timeouts: list[float | None] = []

    def request(self, method, path, body=None, timeout=None) -> bytes:
        self.calls.append((method, path, copy.deepcopy(body)))
        self.timeouts.append(timeout)
        response = self.responses.get((method, path))
        if isinstance(response, Exception):
            raise response
        if response is None:
            if method == 'PUT':
                response = [{'success': {f'{path}/{k}': v}} for k, v in (body or {}).items()]
            else:
                response = [{'error': {'type': 3, 'address': path,
                                       'description': f'resource, {path}, not available'}}]
        return json.dumps(response).encode()

    def paths(self, method: str | None = None) -> list[str]:
        return [p for m, p, _ in self.calls if method is None or m == method]


@pytest.fixture
def bridge_payloads():
    """Return deep copies of the canned bridge listings."""
    return {
        'lights': copy.deepcopy(LIGHTS),
        'sensors': copy.deepcopy(SENSORS),
        'groups': copy.deepcopy(GROUPS),
        'all': copy.deepcopy(ALL_GROUP),
    }


@pytest.fixture
def transport(bridge_payloads):
    """A fake transport serving a small bridge with 3 devices, 2 sensors and 2 groups."""
    responses = {
        ('GET', '/lights'): bridge_payloads['lights'],
        ('GET', '/sensors'): bridge_payloads['sensors'],
        ('GET', '/groups'): bridge_payloads['groups'],
        ('GET', '/groups/0'): bridge_payloads['all'],
    }
    for device_id, data in bridge_payloads['lights'].items():
        responses[('GET', f'/lights/{device_id}')] = data
    for sensor_id, data in bridge_payloads['sensors'].items():
        responses[('GET', f'/sensors/{sensor_id}')] = data
    for group_id, data in bridge_payloads['groups'].items():
        responses[('GET', f'/groups/{group_id}')] = data
    return FakeTransport(responses)


@pytest.fixture
def bridge(transport):
    """A Bridge wired to the fake transport."""
    return Bridge('10.0.0.2', 'test-key', transport=transport)


@pytest.fixture
def synchronizer(transport):
    return Synchronizer(transport, timeout=5.0)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging(), which binds to the stderr of the CLI runner."""
    yield
    structlog.reset_defaults()
