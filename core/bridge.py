"""Bridge connection and in-memory resource cache.

The Bridge owns four lazily populated maps (lights, controls, sensors,
groups) plus the synthetic 'All' group. A map is fetched on first access and
kept until update(), which discards everything and fetches again. Maps are
always replaced wholesale, never merged.

Groups are resolved against the device and sensor maps, so populating groups
populates those first.
"""

import threading

import structlog

from core.config import DEFAULT_TIMEOUT, build_api_url
from core.errors import DecodeError
from core.sync import Synchronizer
from core.transport import BridgeTransport, fetch_json
from models.decode import decode_device
from models.device import Control
from models.group import DeviceIndex, Group, GroupType
from models.light import Light
from models.sensor import Sensor
from models.types import BridgeSettings

logger = structlog.getLogger(__name__)


def _find_by_name(records: dict, name: str):
    wanted = name.casefold()
    for record in records.values():
        if record.name.casefold() == wanted:
            return record
    return None


class Bridge:
    """Client-side mirror of a Hue bridge."""

    def __init__(self, address: str, key: str, timeout: float = DEFAULT_TIMEOUT,
                 transport=None):
        """Initialise Bridge.

        Args:
            address: Bridge host, host:port or URL
            key: API access key (username)
            timeout: Default seconds allowed per request
            transport: Optional object with request(method, path, body, timeout);
                defaults to an HTTPS BridgeTransport
        """
        self.transport = transport or BridgeTransport(build_api_url(address, key), timeout)
        self.synchronizer = Synchronizer(self.transport, timeout)
        self._lock = threading.RLock()

        self._lights: dict[str, Light] | None = None
        self._controls: dict[str, Control] | None = None
        self._sensors: dict[str, Sensor] | None = None
        self._groups: dict[str, Group] | None = None
        self._all: Group | None = None

    @classmethod
    def from_settings(cls, settings: BridgeSettings, transport=None) -> 'Bridge':
        return cls(settings['address'], settings['key'], settings['timeout'], transport)

    @property
    def timeout(self) -> float:
        return self.synchronizer.timeout

    @timeout.setter
    def timeout(self, value: float):
        self.synchronizer.timeout = value

    def _timeout(self, timeout: float | None) -> float:
        return self.timeout if timeout is None else timeout

    def _listing(self, path: str, timeout: float | None) -> dict:
        data = fetch_json(self.transport, 'GET', path, timeout=self._timeout(timeout))
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise DecodeError(f'could not decode "{path}" listing: expected a JSON object')
        return data

    # ===== Population (caller holds the lock) =====

    def _load_devices(self, timeout: float | None = None):
        listing = self._listing('/lights', timeout)
        lights, controls = {}, {}
        for device_id, data in listing.items():
            try:
                device = decode_device(device_id, data, self.synchronizer)
            except DecodeError as e:
                raise DecodeError(f'could not decode Light "{device_id}": {e}') from e
            if isinstance(device, Light):
                lights[device_id] = device
            else:
                controls[device_id] = device
        self._lights, self._controls = lights, controls
        logger.debug("Populated devices", lights=len(lights), controls=len(controls))

    def _load_sensors(self, timeout: float | None = None):
        listing = self._listing('/sensors', timeout)
        sensors = {}
        for sensor_id, data in listing.items():
            sensor = Sensor(sensor_id, self.synchronizer)
            try:
                sensor.load(data)
            except DecodeError as e:
                raise DecodeError(f'could not decode Sensor "{sensor_id}": {e}') from e
            sensors[sensor_id] = sensor
        self._sensors = sensors
        logger.debug("Populated sensors", sensors=len(sensors))

    def _index(self, timeout: float | None) -> DeviceIndex:
        if self._lights is None or self._controls is None:
            self._load_devices(timeout)
        if self._sensors is None:
            self._load_sensors(timeout)
        return DeviceIndex(self._lights, self._controls, self._sensors)

    def _load_groups(self, timeout: float | None = None):
        index = self._index(timeout)
        listing = self._listing('/groups', timeout)
        groups = {}
        for group_id, data in listing.items():
            group = Group(group_id, self.synchronizer, index)
            try:
                group.load(data)
            except DecodeError as e:
                raise DecodeError(f'could not decode Group "{group_id}": {e}') from e
            groups[group_id] = group
        self._groups = groups
        logger.debug("Populated groups", groups=len(groups))

    def _load_all(self, timeout: float | None = None):
        index = self._index(timeout)
        data = self._listing('/groups/0', timeout)
        group = Group('0', self.synchronizer, index)
        group.group_type = GroupType.ALL
        try:
            group.load(data)
        except DecodeError as e:
            raise DecodeError(f'could not decode All Group: {e}') from e
        self._all = group

    def _devices(self, timeout: float | None) -> tuple[dict[str, Light], dict[str, Control]]:
        with self._lock:
            if self._lights is None or self._controls is None:
                self._load_devices(timeout)
            return self._lights, self._controls

    def _sensor_map(self, timeout: float | None) -> dict[str, Sensor]:
        with self._lock:
            if self._sensors is None:
                self._load_sensors(timeout)
            return self._sensors

    def _group_map(self, timeout: float | None) -> dict[str, Group]:
        with self._lock:
            if self._groups is None:
                self._load_groups(timeout)
            return self._groups

    # ===== Refresh =====

    def update(self, timeout: float | None = None):
        """Discard every cached map and fetch all resources again.

        New devices appear and deleted ones disappear. Records obtained
        before the call are detached from the cache. On failure the kinds
        not yet fetched stay empty and are fetched again on next access.
        """
        with self._lock:
            self._lights = self._controls = self._sensors = None
            self._groups = self._all = None
            self._load_devices(timeout)
            self._load_sensors(timeout)
            self._load_groups(timeout)

    # ===== Accessors =====

    def lights(self, timeout: float | None = None) -> dict[str, Light]:
        """Return all lights keyed by id."""
        return dict(self._devices(timeout)[0])

    def controls(self, timeout: float | None = None) -> dict[str, Control]:
        """Return all controls (outlets and other switch-only devices) keyed by id."""
        return dict(self._devices(timeout)[1])

    def sensors(self, timeout: float | None = None) -> dict[str, Sensor]:
        return dict(self._sensor_map(timeout))

    def groups(self, timeout: float | None = None) -> dict[str, Group]:
        """Return all groups keyed by id, populating devices and sensors first."""
        return dict(self._group_map(timeout))

    def light(self, light_id: str) -> Light | None:
        return self._devices(None)[0].get(light_id)

    def control(self, control_id: str) -> Control | None:
        return self._devices(None)[1].get(control_id)

    def sensor(self, sensor_id: str) -> Sensor | None:
        return self._sensor_map(None).get(sensor_id)

    def group(self, group_id: str) -> Group | None:
        return self._group_map(None).get(group_id)

    def light_by_name(self, name: str) -> Light | None:
        """Return the first light whose name matches case-insensitively."""
        return _find_by_name(self._devices(None)[0], name)

    def control_by_name(self, name: str) -> Control | None:
        return _find_by_name(self._devices(None)[1], name)

    def sensor_by_name(self, name: str) -> Sensor | None:
        return _find_by_name(self._sensor_map(None), name)

    def group_by_name(self, name: str) -> Group | None:
        return _find_by_name(self._group_map(None), name)

    def all_group(self, timeout: float | None = None) -> Group:
        """Return the special group containing every device on the bridge."""
        with self._lock:
            if self._all is None:
                self._load_all(timeout)
            return self._all

    def light_count(self) -> int:
        return len(self._devices(None)[0])

    def control_count(self) -> int:
        return len(self._devices(None)[1])

    def sensor_count(self) -> int:
        return len(self._sensor_map(None))
