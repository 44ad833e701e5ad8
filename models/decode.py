"""Factory turning /lights listing entries into Light or Control records."""

from core.errors import DecodeError
from models.device import Control
from models.light import Light
from models.record import SyncHandle


def is_light(data: dict) -> bool:
    """Decide from the reported capabilities whether an entry is a light.

    An entry is a light when its capabilities.control block reports a
    luminous flux ('maxlumen') or a colour temperature range ('ct').
    """
    capabilities = data.get('capabilities')
    if not isinstance(capabilities, dict):
        return False
    control = capabilities.get('control')
    if not isinstance(control, dict) or not control:
        return False
    return 'maxlumen' in control or 'ct' in control


def decode_device(device_id: str, data: dict, sync: SyncHandle) -> Light | Control:
    """Materialise one /lights entry as a Light or a bare Control.

    Raises:
        DecodeError: if a required field is missing
    """
    if not isinstance(data, dict):
        raise DecodeError(f"device \"{device_id}\" payload must be a JSON object")
    device = Light(device_id, sync) if is_light(data) else Control(device_id, sync)
    device.load(data)
    return device
