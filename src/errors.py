from enum import Enum

class ErrorKind(Enum):
    SENSOR_UNAVAILABLE = "sensor unavailable"
    SENSOR_UNPARSEABLE = "sensor unparseable"
    ENUMERATION_FAILED = "enumeration failed"
    DEVICE_NOT_FOUND = "device not found"
    DEVICE_ACTION_FAILED = "device action failed"
    DISPLAY_ROTATION_FAILED = "display rotation failed"

class RotateError(Exception):
    """Base for every failure a tick can report. `kind` tags the failure."""
    kind: ErrorKind

    def __str__(self):
        msg = super().__str__()
        return f"{self.kind.value}: {msg}" if msg else self.kind.value

class SensorError(RotateError):
    pass

class SensorUnavailable(SensorError):
    kind = ErrorKind.SENSOR_UNAVAILABLE

class SensorUnparseable(SensorError):
    kind = ErrorKind.SENSOR_UNPARSEABLE

class EnumerationFailed(RotateError):
    kind = ErrorKind.ENUMERATION_FAILED

class DisplayRotationFailed(RotateError):
    kind = ErrorKind.DISPLAY_ROTATION_FAILED

class ExecFailed(Exception):
    """A helper command could not be run or exited non-zero."""
    pass

class DeviceNotFound(RotateError):
    kind = ErrorKind.DEVICE_NOT_FOUND

    def __init__(self, device_class, msg=None):
        self.device_class = device_class
        super().__init__(msg or f"no {device_class.value} device found")

class DeviceActionFailed(RotateError):
    kind = ErrorKind.DEVICE_ACTION_FAILED

    def __init__(self, device_class, device, msg=None):
        self.device_class = device_class
        self.device = device
        super().__init__(msg or f"{device_class.value} {device!r}")
