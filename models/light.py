"""Dimmable and colour lights."""

from datetime import timedelta

from core.errors import CapabilityError
from models.color import xy_from_hex, xy_from_rgb
from models.device import Device
from models.gamut import DEFAULT_GAMUT, Gamut
from models.state import (
    Attribute,
    Effect,
    LightState,
    StartupMode,
    check_range,
    deciseconds,
)


class Light(Device):
    """A controllable light.

    Colour setters (hue, saturation, temperature, xy, rgb, hex) raise
    CapabilityError without touching the snapshot when the light reports no
    colour mode.
    """

    def __init__(self, record_id: str, sync, manual: bool = False, gamut: Gamut | None = None):
        super().__init__(record_id, sync, manual)
        self._gamut = gamut

    @property
    def gamut(self) -> Gamut:
        return self._gamut or DEFAULT_GAMUT

    @property
    def is_color(self) -> bool:
        return self.state.color

    @property
    def hue(self) -> int:
        return self.state.hue

    @property
    def saturation(self) -> int:
        return self.state.saturation

    @property
    def brightness(self) -> int:
        return self.state.brightness

    @property
    def temperature(self) -> int:
        return self.state.temperature

    @property
    def xy(self) -> tuple[float, float]:
        return self.state.xy

    @property
    def effect(self) -> Effect:
        return self.state.effect

    @property
    def transition(self) -> timedelta:
        return timedelta(milliseconds=self.state.transition * 100)

    def _require_color(self):
        if not self.state.color:
            raise CapabilityError(f'light "{self.name}" does not support color')

    def set_transition(self, duration: timedelta):
        """Set the transition time sent with every following state change.

        Zero makes changes instantaneous. Some third-party devices run
        transitions at roughly a quarter of the requested time.
        """
        self.state.transition = deciseconds(duration)

    def set_brightness(self, brightness: int):
        check_range('brightness', brightness, 0xFF)
        self.state.brightness = brightness
        self._changed(Attribute.BRIGHTNESS)

    def set_effect(self, effect: Effect):
        self.state.effect = Effect(effect)
        self._changed(Attribute.EFFECT)

    def set_hue(self, hue: int):
        self._require_color()
        check_range('hue', hue, 0xFFFF)
        self.state.hue = hue
        self._changed(Attribute.HUE)

    def set_saturation(self, saturation: int):
        self._require_color()
        check_range('saturation', saturation, 0xFF)
        self.state.saturation = saturation
        self._changed(Attribute.SATURATION)

    def set_temperature(self, temperature: int):
        self._require_color()
        check_range('temperature', temperature, 0xFFFF)
        self.state.temperature = temperature
        self._changed(Attribute.TEMPERATURE)

    def set_xy(self, x: float, y: float):
        """Set the colour as a CIE 1931 xy chromaticity."""
        self._require_color()
        self.state.xy = (float(x), float(y))
        self._changed(Attribute.XY)

    def set_rgb(self, red: int, green: int, blue: int):
        """Set the colour from 8-bit RGB, corrected into this light's gamut."""
        self._require_color()
        self.set_xy(*xy_from_rgb(self.gamut, red, green, blue))

    def set_hex(self, value: str):
        """Set the colour from a 'RRGGBB' or '#RRGGBB' string."""
        self._require_color()
        self.set_xy(*xy_from_hex(self.gamut, value))

    def set_custom_power_on(self, settings: LightState):
        """Restore the staged settings when power returns after an outage."""
        self.startup = StartupMode.CUSTOM
        self.startup_settings = settings.payload()
        self._changed(Attribute.STARTUP)

    def load(self, data: dict):
        gamut = None
        capabilities = data.get('capabilities') if isinstance(data, dict) else None
        control = capabilities.get('control') if isinstance(capabilities, dict) else None
        if isinstance(control, dict) and control.get('colorgamut') is not None:
            gamut = Gamut.from_json(control['colorgamut'])
        super().load(data)
        if gamut is not None:
            self._gamut = gamut
