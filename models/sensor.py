"""Sensors (switches, motion, daylight, temperature...) exposed by the bridge."""

from dataclasses import dataclass
from datetime import datetime

from core.errors import DecodeError, NotFoundError, NotTypeError
from models.record import Record, require
from models.state import Alert, Attribute

TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%S'


@dataclass
class SensorConfig:
    """Writable sensor configuration. led and battery are None when not reported."""
    on: bool = False
    alert: Alert = Alert.NONE
    reachable: bool = False
    led: bool | None = None
    battery: int | None = None

    @classmethod
    def from_json(cls, data: dict) -> 'SensorConfig':
        config = cls(
            on=bool(data.get('on', False)),
            reachable=bool(data.get('reachable', False)),
            led=data.get('ledindication'),
            battery=data.get('battery'),
        )
        if 'alert' in data:
            config.alert = Alert.parse(data['alert'])
        return config

    def payload(self, attributes) -> dict:
        body = {}
        if Attribute.ON in attributes:
            body['on'] = self.on
        if Attribute.ALERT in attributes:
            body['alert'] = self.alert.value
        if Attribute.LED in attributes and self.led is not None:
            body['ledindication'] = self.led
        return body


def parse_timestamp(value) -> datetime | None:
    """Parse a bridge 'lastupdated' value; null, 'none' or empty means never."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"invalid timestamp {value!r}")
    if not value or value == 'none':
        return None
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError as e:
        raise DecodeError(f'invalid timestamp "{value}"') from e


class Sensor(Record):
    """A sensor and its most recently reported values.

    Reported values are kept in `values`, keyed by lower-cased name, and can
    be read with the typed get_* helpers.
    """

    collection = 'sensors'
    state_section = 'config'

    def __init__(self, record_id: str, sync, manual: bool = False):
        super().__init__(record_id, sync, manual)
        self.uuid = ''
        self.make = ''
        self.model = ''
        self.product = ''
        self.updated: datetime | None = None
        self.values: dict = {}
        self.config = SensorConfig()

    @property
    def is_on(self) -> bool:
        return self.config.on

    @property
    def reachable(self) -> bool:
        return self.config.reachable

    @property
    def alert(self) -> Alert:
        return self.config.alert

    @property
    def has_led(self) -> bool:
        return self.config.led is not None

    @property
    def led(self) -> bool:
        return bool(self.config.led)

    @property
    def has_battery(self) -> bool:
        return self.config.battery is not None

    @property
    def battery(self) -> int:
        """Battery level in percent, 0 when not reported."""
        return self.config.battery or 0

    def on(self):
        self.set_on(True)

    def off(self):
        self.set_on(False)

    def set_on(self, on: bool):
        self.config.on = bool(on)
        self._changed(Attribute.ON)

    def set_led(self, enabled: bool):
        """Turn the sensor's LED indicator on or off."""
        self.config.led = bool(enabled)
        self._changed(Attribute.LED)

    def set_alert(self, alert: Alert):
        self.config.alert = Alert(alert)
        self._changed(Attribute.ALERT)

    def contains(self, name: str) -> bool:
        return name.lower() in self.values

    def get(self, name: str, default=None):
        return self.values.get(name.lower(), default)

    def _lookup(self, name: str, types: tuple):
        key = name.lower()
        if key not in self.values:
            raise NotFoundError(f'sensor "{self.name}" does not report "{name}"')
        value = self.values[key]
        # bool is an int subclass; never accept it as a number
        if not isinstance(value, types) or (bool not in types and isinstance(value, bool)):
            raise NotTypeError(f'sensor value "{name}" is {type(value).__name__}')
        return value

    def get_bool(self, name: str) -> bool:
        return self._lookup(name, (bool,))

    def get_string(self, name: str) -> str:
        return self._lookup(name, (str,))

    def get_number(self, name: str) -> float:
        return float(self._lookup(name, (int, float)))

    def state_payload(self) -> dict:
        return self.config.payload(self.state_attributes())

    def load(self, data: dict):
        name = require(data, 'name', 'sensor')
        make = require(data, 'type', 'sensor')
        model = require(data, 'modelid', 'sensor')
        state = require(data, 'state', 'sensor')
        config = require(data, 'config', 'sensor')
        if not isinstance(state, dict) or not isinstance(config, dict):
            raise DecodeError('"state" and "config" must be JSON objects')
        values = {k.lower(): v for k, v in state.items()}
        updated = parse_timestamp(values.pop('lastupdated', 'none'))
        parsed = SensorConfig.from_json(config)
        self._name, self.make, self.model = name, make, model
        self.uuid = data.get('uniqueid', '')
        self.product = data.get('productname', '')
        self.values, self.updated, self.config = values, updated, parsed
