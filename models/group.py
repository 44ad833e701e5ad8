"""Groups of lights: rooms, zones, luminaires and the synthetic 'All' group.

Group membership is stored on the bridge as lists of ids. They are resolved
against the Light, Control and Sensor maps of the same population pass; ids
that are no longer present are dropped.
"""

from datetime import timedelta
from enum import Enum
from typing import NamedTuple

import structlog

from core.errors import CapabilityError, DecodeError, FormatError
from models.color import xy_from_hex, xy_from_rgb
from models.device import Control
from models.gamut import DEFAULT_GAMUT
from models.light import Light
from models.record import Record, require
from models.sensor import Sensor
from models.state import (
    Alert,
    Attribute,
    ColorState,
    Effect,
    check_range,
    deciseconds,
)

logger = structlog.getLogger(__name__)


class GroupType(Enum):
    """Kind of group, as reported in the 'type' field."""
    LUMINAIRE = 'Luminaire'
    LIGHT_SOURCE = 'Lightsource'
    LIGHT_GROUP = 'LightGroup'
    ROOM = 'Room'
    ENTERTAINMENT = 'Entertainment'
    ZONE = 'Zone'
    # Group 0, never listed by the bridge
    ALL = 'All'

    @classmethod
    def parse(cls, value) -> 'GroupType':
        if isinstance(value, str):
            for member in cls:
                if member is not cls.ALL and member.value.lower() == value.lower():
                    return member
        raise FormatError(f"invalid GroupType value {value!r}")


class GroupClass(Enum):
    """Room classification chosen in the Hue app."""
    INVALID = 'Auto/Invalid'
    ATTIC = 'Attic'
    BALCONY = 'Balcony'
    BARBECUE = 'Barbecue'
    BATHROOM = 'Bathroom'
    BEDROOM = 'Bedroom'
    CARPORT = 'Carport'
    CLOSET = 'Closet'
    COMPUTER = 'Computer'
    DINING = 'Dining'
    DOWNSTAIRS = 'Downstairs'
    DRIVEWAY = 'Driveway'
    FRONT_DOOR = 'Front door'
    GARAGE = 'Garage'
    GARDEN = 'Garden'
    GUEST_ROOM = 'Guest room'
    GYM = 'Gym'
    HALLWAY = 'Hallway'
    HOME = 'Home'
    KIDS_BEDROOM = 'Kids bedroom'
    KITCHEN = 'Kitchen'
    LAUNDRY_ROOM = 'Laundry room'
    LIVING_ROOM = 'Living room'
    LOUNGE = 'Lounge'
    MAN_CAVE = 'Man cave'
    MUSIC = 'Music'
    NURSERY = 'Nursery'
    OFFICE = 'Office'
    OTHER = 'Other'
    POOL = 'Pool'
    PORCH = 'Porch'
    READING = 'Reading'
    RECREATION = 'Recreation'
    STAIRCASE = 'Staircase'
    STORAGE = 'Storage'
    STUDIO = 'Studio'
    TV = 'TV'
    TERRACE = 'Terrace'
    TOILET = 'Toilet'
    TOP_FLOOR = 'Top floor'
    UPSTAIRS = 'Upstairs'

    @classmethod
    def parse(cls, value) -> 'GroupClass':
        """Unknown class names map to INVALID; non-strings are a FormatError."""
        if not isinstance(value, str):
            raise FormatError(f"invalid GroupClass value {value!r}")
        for member in cls:
            if member.value.lower() == value.lower():
                return member
        return cls.INVALID


class DeviceIndex(NamedTuple):
    """The device maps of one population pass, used to resolve membership."""
    lights: dict[str, Light]
    controls: dict[str, Control]
    sensors: dict[str, Sensor]


def _id_list(data: dict, field: str) -> list[str]:
    ids = data.get(field) or []
    if not isinstance(ids, list):
        raise DecodeError(f'"{field}" must be a list of ids')
    return [str(i) for i in ids]


class Group(Record):
    """A group of devices sharing an 'action' state."""

    collection = 'groups'
    state_section = 'action'

    def __init__(self, record_id: str, sync, index: DeviceIndex, manual: bool = False):
        super().__init__(record_id, sync, manual)
        self._index = index
        self.group_type = GroupType.LIGHT_GROUP
        self.group_class = GroupClass.INVALID
        self.action = ColorState()
        self.lights: list[Light] = []
        self.controls: list[Control] = []
        self.sensors: list[Sensor] = []
        self.any_on = False
        self.all_on = False

    @property
    def is_color(self) -> bool:
        return self.action.color

    def on(self):
        self.set_on(True)

    def off(self):
        self.set_on(False)

    def set_on(self, on: bool):
        self.action.on = bool(on)
        self._changed(Attribute.ON)

    def set_alert(self, alert: Alert):
        self.action.alert = Alert(alert)
        self._changed(Attribute.ALERT)

    def set_effect(self, effect: Effect):
        self.action.effect = Effect(effect)
        self._changed(Attribute.EFFECT)

    def set_transition(self, duration: timedelta):
        self.action.transition = deciseconds(duration)

    def set_brightness(self, brightness: int):
        check_range('brightness', brightness, 0xFF)
        self.action.brightness = brightness
        self._changed(Attribute.BRIGHTNESS)

    def _require_color(self):
        if not self.action.color:
            raise CapabilityError(f'group "{self.name}" does not support color')

    def set_hue(self, hue: int):
        self._require_color()
        check_range('hue', hue, 0xFFFF)
        self.action.hue = hue
        self._changed(Attribute.HUE)

    def set_saturation(self, saturation: int):
        self._require_color()
        check_range('saturation', saturation, 0xFF)
        self.action.saturation = saturation
        self._changed(Attribute.SATURATION)

    def set_temperature(self, temperature: int):
        self._require_color()
        check_range('temperature', temperature, 0xFFFF)
        self.action.temperature = temperature
        self._changed(Attribute.TEMPERATURE)

    def set_xy(self, x: float, y: float):
        self._require_color()
        self.action.xy = (float(x), float(y))
        self._changed(Attribute.XY)

    def set_rgb(self, red: int, green: int, blue: int):
        # Members may have different gamuts; the bridge corrects per light
        self._require_color()
        self.set_xy(*xy_from_rgb(DEFAULT_GAMUT, red, green, blue))

    def set_hex(self, value: str):
        self._require_color()
        self.set_xy(*xy_from_hex(DEFAULT_GAMUT, value))

    def state_payload(self) -> dict:
        return self.action.payload(self.state_attributes())

    def _resolve(self, ids: list[str], *maps: dict) -> list:
        found = []
        for i in ids:
            for lookup in maps:
                if i in lookup:
                    found.append(lookup[i])
                    break
            else:
                logger.warning("Dropping unknown group member", group=self.id, member=i)
        return found

    def load(self, data: dict):
        name = require(data, 'name', 'group')
        group_type = GroupType.parse(require(data, 'type', 'group'))
        action = data.get('action')
        if action is not None and not isinstance(action, dict):
            raise DecodeError('"action" must be a JSON object')
        group_class = GroupClass.parse(data['class']) if 'class' in data else GroupClass.INVALID
        device_ids = _id_list(data, 'lights')
        sensor_ids = _id_list(data, 'sensors')
        state = data.get('state') or {}
        if not isinstance(state, dict):
            raise DecodeError('"state" must be a JSON object')
        snapshot = self.action
        if action is not None:
            snapshot = ColorState.from_json(action, transition=self.action.transition)

        members = self._resolve(device_ids, self._index.lights, self._index.controls)
        self.lights = [m for m in members if isinstance(m, Light)]
        self.controls = [m for m in members if not isinstance(m, Light)]
        self.sensors = self._resolve(sensor_ids, self._index.sensors)
        self.action = snapshot
        self._name = name
        self.group_class = group_class
        if self.group_type is not GroupType.ALL:
            self.group_type = group_type
        self.any_on = bool(state.get('any_on', False))
        self.all_on = bool(state.get('all_on', False))
