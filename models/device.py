"""Devices listed under the bridge's /lights collection.

The listing mixes plain switchable outlets (Control) with dimmable or colour
lights (Light, see models/light.py). Both share the metadata, power, alert
and startup behaviour defined here.
"""

from core.errors import DecodeError
from models.record import Record, require
from models.state import Alert, Attribute, ColorState, StartupMode


class Device(Record):
    """Common behaviour of Lights and Controls."""

    collection = 'lights'
    state_section = 'state'

    def __init__(self, record_id: str, sync, manual: bool = False):
        super().__init__(record_id, sync, manual)
        self.uuid = ''
        self.make = ''
        self.model = ''
        self.product = ''
        self.state = ColorState()
        self.startup = StartupMode.DEFAULT
        self.startup_settings: dict | None = None

    @property
    def is_on(self) -> bool:
        return self.state.on

    @property
    def reachable(self) -> bool:
        return self.state.reachable

    @property
    def alert(self) -> Alert:
        return self.state.alert

    def on(self):
        self.set_on(True)

    def off(self):
        self.set_on(False)

    def set_on(self, on: bool):
        self.state.on = bool(on)
        self._changed(Attribute.ON)

    def set_alert(self, alert: Alert):
        self.state.alert = Alert(alert)
        self._changed(Attribute.ALERT)

    def set_power_on(self, mode: StartupMode):
        """Change what the device does after a power loss.

        Not every device supports this; mostly first-party hardware does.
        """
        self.startup = StartupMode(mode)
        self.startup_settings = None
        self._changed(Attribute.STARTUP)

    def identity_payload(self) -> dict:
        body = super().identity_payload()
        if Attribute.STARTUP in self.dirty:
            startup = {'mode': self.startup.value}
            if self.startup_settings is not None:
                startup['customsettings'] = self.startup_settings
            body['config'] = {'startup': startup}
        return body

    def state_payload(self) -> dict:
        return self.state.payload(self.state_attributes())

    def load(self, data: dict):
        name = require(data, 'name')
        uuid = require(data, 'uniqueid')
        make = require(data, 'type')
        model = require(data, 'modelid')
        product = require(data, 'productname')
        state = require(data, 'state')
        if not isinstance(state, dict):
            raise DecodeError('"state" must be a JSON object')
        snapshot = ColorState.from_json(state, transition=self.state.transition)
        startup = (data.get('config') or {}).get('startup')
        if startup:
            self.startup = StartupMode.parse(require(startup, 'mode'))
            self.startup_settings = startup.get('customsettings')
        self._name, self.uuid, self.make = name, uuid, make
        self.model, self.product = model, product
        self.state = snapshot


class Control(Device):
    """A switch-only device such as a smart outlet.

    Controls support power, alert and startup behaviour but have no colour
    or brightness.
    """
