import logging
from errors import (
    DeviceActionFailed, DeviceNotFound, DisplayRotationFailed, ExecFailed)
from orientation import (
    DEFAULT_PATTERNS, DeviceClass, activation, match_devices, rotation, transform)

logger = logging.getLogger(__name__)

class OrientationCoordinator:
    """
    Applies one orientation: display rotation, keyboard, touchpads, then
    touch input transforms. The first failure aborts the rest and is
    raised; whatever already ran is left applied.
    """

    def __init__(self, display, inputs, patterns=None):
        self.display = display
        self.inputs = inputs
        self.patterns = dict(DEFAULT_PATTERNS)
        if patterns:
            self.patterns.update(patterns)

    def apply(self, orientation, catalog, rotate_display=True):
        if rotate_display:
            self.rotate_display(orientation)
        act = activation(orientation)
        self.toggle(DeviceClass.KEYBOARD, catalog, act.keyboard_enabled)
        self.toggle(DeviceClass.TOUCHPAD, catalog, act.touchpad_enabled)
        self.remap_touch(orientation, catalog)

    def rotate_display(self, orientation):
        rot = rotation(orientation)
        try:
            self.display.set_rotation(rot)
        except ExecFailed as e:
            raise DisplayRotationFailed(f"rotating to {rot}: {e}") from e

    def find(self, device_class, catalog):
        # Devices come and go, so always ask the live catalog
        devices = match_devices(catalog.list_devices(), self.patterns[device_class])
        if not devices:
            raise DeviceNotFound(device_class)
        return devices

    def toggle(self, device_class, catalog, enable):
        action = self.inputs.enable if enable else self.inputs.disable
        for device in self.find(device_class, catalog):
            try:
                action(device)
            except ExecFailed as e:
                raise DeviceActionFailed(device_class, device, str(e)) from e
            logger.debug("%s %s", "Enabled" if enable else "Disabled", device)

    def remap_touch(self, orientation, catalog):
        matrix = transform(orientation)
        for device in self.find(DeviceClass.TOUCH_INPUT, catalog):
            try:
                self.inputs.set_transform(device, matrix)
            except ExecFailed as e:
                raise DeviceActionFailed(DeviceClass.TOUCH_INPUT, device, str(e)) from e
