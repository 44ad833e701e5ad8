"""Attribute, enumeration and state types shared by all resource records.

This module contains:
- Attribute: settable attributes tracked in a record's dirty set
- Alert, Effect, StartupMode: enumerations with their bridge wire strings
- ColorState: the light/control/group state snapshot and its partial payloads
- LightState: a detached, staged state used for custom power-on settings
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from core.errors import DecodeError, FormatError
from models.color import xy_from_hex, xy_from_rgb
from models.gamut import DEFAULT_GAMUT


class Attribute(Enum):
    """A settable attribute whose local edits are pushed to the bridge."""
    XY = 'xy'
    ON = 'on'
    HUE = 'hue'
    ALERT = 'alert'
    EFFECT = 'effect'
    BRIGHTNESS = 'bri'
    SATURATION = 'sat'
    TEMPERATURE = 'ct'
    NAME = 'name'
    STARTUP = 'startup'
    LED = 'ledindication'


# Attributes written to the resource root rather than its state sub-resource
IDENTITY_ATTRIBUTES = frozenset({Attribute.NAME, Attribute.STARTUP})


def _parse_wire(cls, value, prefixes: dict[str, Enum]):
    if not isinstance(value, str) or not value:
        raise FormatError(f"invalid {cls.__name__} value {value!r}")
    member = prefixes.get(value[0].lower())
    if member is None:
        raise FormatError(f'invalid {cls.__name__} value "{value}"')
    return member


class Alert(Enum):
    """Alert (breathe) effect of a device."""
    NONE = 'none'
    SELECT = 'select'
    BREATHE = 'lselect'

    @classmethod
    def parse(cls, value) -> 'Alert':
        return _parse_wire(cls, value, {'n': cls.NONE, 's': cls.SELECT, 'l': cls.BREATHE})


class Effect(Enum):
    """Dynamic light effect."""
    NONE = 'none'
    COLOR_LOOP = 'colorloop'

    @classmethod
    def parse(cls, value) -> 'Effect':
        return _parse_wire(cls, value, {'n': cls.NONE, 'c': cls.COLOR_LOOP})


class StartupMode(Enum):
    """What a device does when power returns after an outage."""
    DEFAULT = 'safety'
    RESUME = 'powerfail'
    CUSTOM = 'custom'

    @classmethod
    def parse(cls, value) -> 'StartupMode':
        return _parse_wire(cls, value, {'s': cls.DEFAULT, 'p': cls.RESUME, 'c': cls.CUSTOM})


def check_range(name: str, value: int, upper: int):
    """Raise ValueError unless 0 <= value <= upper."""
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= upper:
        raise ValueError(f"{name} must be an integer between 0 and {upper}, got {value!r}")


def deciseconds(duration: timedelta) -> int:
    """Convert a transition duration to the bridge's 100ms units."""
    value = int(duration / timedelta(milliseconds=100))
    check_range('transition', value, 0xFFFF)
    return value


@dataclass
class ColorState:
    """Last known (or locally edited) state of a light, control or group."""
    xy: tuple[float, float] = (0.0, 0.0)
    hue: int = 0
    saturation: int = 0
    brightness: int = 0
    temperature: int = 0
    color: bool = False
    alert: Alert = Alert.NONE
    effect: Effect = Effect.NONE
    transition: int = 0
    reachable: bool = False
    on: bool = False

    @classmethod
    def from_json(cls, data: dict, transition: int = 0) -> 'ColorState':
        """Decode a bridge 'state' or 'action' object.

        The transition time is not part of a device's reported state, so the
        caller passes in the currently configured value to carry over.
        """
        state = cls(transition=transition)
        if 'xy' in data:
            try:
                x, y = data['xy']
                state.xy = (float(x), float(y))
            except (TypeError, ValueError) as e:
                raise DecodeError(f"invalid xy value {data['xy']!r}") from e
        state.hue = data.get('hue', 0)
        state.saturation = data.get('sat', 0)
        state.brightness = data.get('bri', 0)
        state.temperature = data.get('ct', 0)
        state.on = bool(data.get('on', False))
        state.reachable = bool(data.get('reachable', False))
        state.transition = data.get('transitiontime', transition)
        # Only colour capable devices report a colour mode
        state.color = isinstance(data.get('colormode'), str) and len(data['colormode']) >= 2
        if 'alert' in data:
            state.alert = Alert.parse(data['alert'])
        if 'effect' in data:
            state.effect = Effect.parse(data['effect'])
        return state

    def payload(self, attributes) -> dict:
        """Build a partial state body holding only the given attributes.

        The transition time has no attribute of its own and is always sent.
        """
        body = {'transitiontime': self.transition}
        if Attribute.ON in attributes:
            body['on'] = self.on
        if Attribute.XY in attributes:
            body['xy'] = list(self.xy)
        if Attribute.HUE in attributes:
            body['hue'] = self.hue
        if Attribute.ALERT in attributes:
            body['alert'] = self.alert.value
        if Attribute.EFFECT in attributes:
            body['effect'] = self.effect.value
        if Attribute.BRIGHTNESS in attributes:
            body['bri'] = self.brightness
        if Attribute.SATURATION in attributes:
            body['sat'] = self.saturation
        if Attribute.TEMPERATURE in attributes:
            body['ct'] = self.temperature
        return body


class LightState:
    """A staged set of light settings, detached from any device.

    Used to describe custom power-on behaviour. Colours are computed against
    the default gamut since the target device is not known.
    """

    def __init__(self):
        self.state = ColorState()
        self.dirty: set[Attribute] = set()

    def set_on(self, on: bool):
        self.state.on = bool(on)
        self.dirty.add(Attribute.ON)

    def set_alert(self, alert: Alert):
        self.state.alert = Alert(alert)
        self.dirty.add(Attribute.ALERT)

    def set_hue(self, hue: int):
        check_range('hue', hue, 0xFFFF)
        self.state.hue = hue
        self.dirty.add(Attribute.HUE)

    def set_effect(self, effect: Effect):
        self.state.effect = Effect(effect)
        self.dirty.add(Attribute.EFFECT)

    def set_brightness(self, brightness: int):
        check_range('brightness', brightness, 0xFF)
        self.state.brightness = brightness
        self.dirty.add(Attribute.BRIGHTNESS)

    def set_saturation(self, saturation: int):
        check_range('saturation', saturation, 0xFF)
        self.state.saturation = saturation
        self.dirty.add(Attribute.SATURATION)

    def set_temperature(self, temperature: int):
        check_range('temperature', temperature, 0xFFFF)
        self.state.temperature = temperature
        self.dirty.add(Attribute.TEMPERATURE)

    def set_xy(self, x: float, y: float):
        self.state.xy = (float(x), float(y))
        self.dirty.add(Attribute.XY)

    def set_rgb(self, red: int, green: int, blue: int):
        self.set_xy(*xy_from_rgb(DEFAULT_GAMUT, red, green, blue))

    def set_hex(self, value: str):
        self.set_xy(*xy_from_hex(DEFAULT_GAMUT, value))

    def set_transition(self, duration: timedelta):
        self.state.transition = deciseconds(duration)

    def payload(self) -> dict:
        return self.state.payload(self.dirty)
