"""Tests for device records in models/device.py, models/light.py and models/decode.py"""

import copy
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from core.errors import CapabilityError, DecodeError, FormatError
from models.decode import decode_device, is_light
from models.device import Control
from models.gamut import DEFAULT_GAMUT
from models.light import Light
from models.state import (
    Alert,
    Attribute,
    ColorState,
    Effect,
    LightState,
    StartupMode,
    check_range,
    deciseconds,
)
from tests.payloads import LIGHTS


@pytest.fixture
def sync():
    return MagicMock()


def _device(device_id, sync):
    return decode_device(device_id, copy.deepcopy(LIGHTS[device_id]), sync)


class TestDecodeDevice:
    """Tests for the Light / Control factory."""

    def test_colour_light(self, sync):
        light = _device('1', sync)
        assert isinstance(light, Light)
        assert light.name == 'Kitchen Light'
        assert light.model == 'LCT015'
        assert light.product == 'Hue color lamp'
        assert light.is_color
        assert light.is_on
        assert light.brightness == 200
        assert light.xy == (0.4573, 0.41)
        assert light.gamut.red == (0.6915, 0.3083)

    def test_white_light(self, sync):
        """A light without a colour mode is a Light, but not a colour one."""
        light = _device('2', sync)
        assert isinstance(light, Light)
        assert not light.is_color
        assert light.alert is Alert.SELECT
        assert light.gamut is DEFAULT_GAMUT

    def test_outlet_is_control(self, sync):
        control = _device('3', sync)
        assert isinstance(control, Control)
        assert not isinstance(control, Light)
        assert control.startup is StartupMode.RESUME

    def test_is_light(self):
        assert is_light({'capabilities': {'control': {'ct': {'min': 153}}}})
        assert is_light({'capabilities': {'control': {'maxlumen': 800}}})
        assert not is_light({'capabilities': {'control': {}}})
        assert not is_light({})

    @pytest.mark.parametrize('field', ['name', 'uniqueid', 'type', 'modelid', 'productname', 'state'])
    def test_missing_field(self, sync, field):
        data = copy.deepcopy(LIGHTS['1'])
        del data[field]
        with pytest.raises(DecodeError, match=f'missing "{field}" parameter value'):
            decode_device('1', data, sync)

    def test_payload_not_object(self, sync):
        with pytest.raises(DecodeError):
            decode_device('1', ['not', 'an', 'object'], sync)

    def test_decoding_never_syncs(self, sync):
        _device('1', sync)
        sync.sync.assert_not_called()


class TestLoad:
    """Tests for replacing a device snapshot."""

    def test_failed_load_leaves_record_untouched(self, sync):
        light = _device('1', sync)
        data = copy.deepcopy(LIGHTS['1'])
        data['name'] = 'Changed'
        data['state']['xy'] = 'bogus'
        with pytest.raises(DecodeError):
            light.load(data)
        assert light.name == 'Kitchen Light'
        assert light.xy == (0.4573, 0.41)

    def test_bad_gamut_leaves_record_untouched(self, sync):
        light = _device('1', sync)
        gamut = light.gamut
        data = copy.deepcopy(LIGHTS['1'])
        data['name'] = 'Changed'
        data['state']['bri'] = 7
        data['capabilities']['control']['colorgamut'] = [[0.1, 0.2]]
        with pytest.raises(DecodeError):
            light.load(data)
        assert light.name == 'Kitchen Light'
        assert light.brightness == 200
        assert light.gamut is gamut

    def test_transition_survives_reload(self, sync):
        """The bridge never reports transition times, so the local one is kept."""
        light = _device('1', sync)
        light.set_transition(timedelta(seconds=2))
        light.load(copy.deepcopy(LIGHTS['1']))
        assert light.transition == timedelta(seconds=2)


class TestCapabilities:
    """Colour operations on lights without colour support."""

    @pytest.mark.parametrize('call', [
        lambda l: l.set_hue(100),
        lambda l: l.set_saturation(100),
        lambda l: l.set_temperature(300),
        lambda l: l.set_xy(0.3, 0.3),
        lambda l: l.set_rgb(255, 0, 0),
        lambda l: l.set_hex('#FF0000'),
    ])
    def test_colour_setters_rejected(self, sync, call):
        light = _device('2', sync)
        before = copy.deepcopy(light.state)
        with pytest.raises(CapabilityError):
            call(light)
        assert light.state == before
        assert not light.dirty
        sync.sync.assert_not_called()

    def test_brightness_allowed_without_colour(self, sync):
        light = _device('2', sync)
        light.manual = True
        light.set_brightness(100)
        assert light.brightness == 100
        assert light.dirty == {Attribute.BRIGHTNESS}


class TestMutators:
    """Tests for staging and pushing edits."""

    def test_auto_mode_pushes_each_edit(self, sync):
        light = _device('1', sync)
        light.set_on(False)
        sync.sync.assert_called_once_with(light, timeout=None)
        assert not light.is_on

    def test_manual_mode_only_stages(self, sync):
        light = _device('1', sync)
        light.manual = True
        light.set_on(False)
        light.set_brightness(10)
        light.set_hue(500)
        light.set_alert(Alert.BREATHE)
        light.set_effect(Effect.COLOR_LOOP)
        sync.sync.assert_not_called()
        assert light.dirty == {Attribute.ON, Attribute.BRIGHTNESS, Attribute.HUE,
                               Attribute.ALERT, Attribute.EFFECT}

    def test_update_delegates_to_sync(self, sync):
        light = _device('1', sync)
        light.update(timeout=3.0)
        sync.sync.assert_called_once_with(light, timeout=3.0)

    @pytest.mark.parametrize('value', [-1, 256, True, 1.5])
    def test_brightness_out_of_range(self, sync, value):
        light = _device('1', sync)
        light.manual = True
        with pytest.raises(ValueError):
            light.set_brightness(value)
        assert not light.dirty

    def test_set_rgb_uses_light_gamut(self, sync):
        light = _device('1', sync)
        light.manual = True
        light.set_rgb(255, 0, 0)
        x, y = light.xy
        assert x == pytest.approx(0.6915, abs=0.01)
        assert y == pytest.approx(0.3083, abs=0.01)
        assert light.dirty == {Attribute.XY}

    def test_invalid_hex_stages_nothing(self, sync):
        light = _device('1', sync)
        light.manual = True
        with pytest.raises(FormatError):
            light.set_hex('#12345')
        assert not light.dirty

    def test_transition_is_not_an_edit(self, sync):
        light = _device('1', sync)
        light.manual = True
        light.set_transition(timedelta(milliseconds=1500))
        assert light.state.transition == 15
        assert light.transition == timedelta(seconds=1.5)
        assert not light.dirty

    def test_discard(self, sync):
        light = _device('1', sync)
        light.manual = True
        light.set_brightness(10)
        light.discard()
        assert not light.is_dirty


class TestPayloads:
    """Tests for the bodies built from pending edits."""

    def test_state_payload_holds_only_dirty_fields(self, sync):
        light = _device('1', sync)
        light.manual = True
        light.set_brightness(50)
        light.set_name('Renamed')
        assert light.state_payload() == {'transitiontime': 0, 'bri': 50}
        assert light.identity_payload() == {'name': 'Renamed'}

    def test_power_on_payload(self, sync):
        control = _device('3', sync)
        control.manual = True
        control.set_power_on(StartupMode.DEFAULT)
        assert control.identity_payload() == {'config': {'startup': {'mode': 'safety'}}}

    def test_custom_power_on_payload(self, sync):
        light = _device('1', sync)
        light.manual = True
        settings = LightState()
        settings.set_on(True)
        settings.set_brightness(120)
        light.set_custom_power_on(settings)
        assert light.startup is StartupMode.CUSTOM
        assert light.identity_payload() == {
            'config': {'startup': {'mode': 'custom', 'customsettings': {
                'transitiontime': 0, 'on': True, 'bri': 120,
            }}},
        }


class TestStateTypes:
    """Tests for enumerations and helpers in models/state.py"""

    @pytest.mark.parametrize('value,expected', [
        ('none', Alert.NONE), ('select', Alert.SELECT), ('lselect', Alert.BREATHE),
        ('LSELECT', Alert.BREATHE),
    ])
    def test_alert_parse(self, value, expected):
        assert Alert.parse(value) is expected

    @pytest.mark.parametrize('value', ['', 'x', None, 3])
    def test_alert_parse_invalid(self, value):
        with pytest.raises(FormatError):
            Alert.parse(value)

    def test_effect_and_startup_parse(self):
        assert Effect.parse('colorloop') is Effect.COLOR_LOOP
        assert StartupMode.parse('powerfail') is StartupMode.RESUME
        assert StartupMode.parse('custom') is StartupMode.CUSTOM
        assert StartupMode.parse('safety') is StartupMode.DEFAULT

    def test_colour_mode_detection(self):
        assert ColorState.from_json({'colormode': 'xy'}).color
        assert ColorState.from_json({'colormode': 'hs'}).color
        assert not ColorState.from_json({'colormode': 'x'}).color
        assert not ColorState.from_json({}).color

    def test_payload_always_has_transition(self):
        state = ColorState(transition=4)
        assert state.payload(set()) == {'transitiontime': 4}

    def test_check_range(self):
        check_range('hue', 0, 0xFFFF)
        check_range('hue', 0xFFFF, 0xFFFF)
        with pytest.raises(ValueError):
            check_range('hue', 0x10000, 0xFFFF)

    def test_deciseconds(self):
        assert deciseconds(timedelta(0)) == 0
        assert deciseconds(timedelta(seconds=3)) == 30
        with pytest.raises(ValueError):
            deciseconds(timedelta(hours=2))
