"""
Pure orientation policy: from a calibrated accelerometer reading to the
posture of the laptop, and from a posture to what the screen and input
devices should do.

The accelerometer sits in the screen. Values range from about -10 to 10:

    normal mode, screen facing the user       x = 0    y ~= -10  z = 0
    screen upside down (tent)                 x = 0    y ~= 10   z = 0
    rotated left                              x ~= -10 y = 0     z = 0
    rotated right                             x ~= 10  y = 0     z = 0
    screen horizontal facing the sky          x = 0    y = 0     z ~= -10

There is no accelerometer in the keyboard half, so anything other than
normal mode is assumed to have the keyboard folded behind the screen.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence, Tuple
import numpy as np

class Orientation(Enum):
    NORMAL = "normal"
    PORTRAIT_LEFT = "portrait-left"
    PORTRAIT_RIGHT = "portrait-right"
    TENT = "tent"
    TABLET = "tablet"

@dataclass(frozen=True)
class CalibratedSample:
    x: float
    y: float
    z: float

    @staticmethod
    def from_raw(x, y, z, scale, offset):
        def normalize(v):
            return (v + offset) * scale
        return CalibratedSample(normalize(x), normalize(y), normalize(z))

    @staticmethod
    def from_values(values):
        """Build from a mapping of accel_* ids, as read from the sensor."""
        return CalibratedSample.from_raw(
            values["accel_x"], values["accel_y"], values["accel_z"],
            values["accel_scale"], values["accel_offset"])

def _within(v, lo, hi):
    return lo <= v <= hi

def classify(sample: CalibratedSample) -> Orientation:
    """
    First match wins, so x overrides z which overrides y. The bands are
    wide enough that a rotation in progress already reads as its
    destination.
    """
    if _within(sample.x, -11.0, -5.0):
        return Orientation.PORTRAIT_LEFT
    if _within(sample.x, 5.0, 11.0):
        return Orientation.PORTRAIT_RIGHT
    if _within(sample.z, -11.0, -7.0):
        return Orientation.TABLET
    if _within(sample.y, 7.0, 11.0):
        return Orientation.TENT
    return Orientation.NORMAL

class DeviceClass(Enum):
    KEYBOARD = "keyboard"
    TOUCHPAD = "touchpad"
    TOUCH_INPUT = "touch input"

DEFAULT_PATTERNS: Dict[DeviceClass, Tuple[str, ...]] = {
    DeviceClass.KEYBOARD: ("AT Translated Set 2 keyboard",),
    DeviceClass.TOUCHPAD: ("touchpad", "trackpoint"),
    DeviceClass.TOUCH_INPUT: ("touchscreen", "wacom"),
}

def match_devices(devices: Sequence[str], patterns: Sequence[str]) -> List[str]:
    lowered = [p.lower() for p in patterns]
    return [dev for dev in devices
            if any(p in dev.lower() for p in lowered)]

@dataclass(frozen=True)
class Activation:
    keyboard_enabled: bool
    touchpad_enabled: bool

def activation(orientation: Orientation) -> Activation:
    enabled = orientation == Orientation.NORMAL
    return Activation(keyboard_enabled=enabled, touchpad_enabled=enabled)

# xrandr --orientation argument per posture
ROTATIONS = {
    Orientation.NORMAL: "normal",
    Orientation.TABLET: "normal",
    Orientation.PORTRAIT_LEFT: "right",
    Orientation.PORTRAIT_RIGHT: "left",
    Orientation.TENT: "inverted",
}

def rotation(orientation: Orientation) -> str:
    return ROTATIONS[orientation]

IDENTITY = (1, 0, 0, 0, 1, 0, 0, 0, 1)

# Row-major coordinate transformation matrices, matching ROTATIONS
TRANSFORMS = {
    Orientation.NORMAL: IDENTITY,
    Orientation.TABLET: IDENTITY,
    Orientation.PORTRAIT_LEFT: (0, 1, 0, -1, 0, 1, 0, 0, 1),
    Orientation.PORTRAIT_RIGHT: (0, -1, 1, 1, 0, 0, 0, 0, 1),
    Orientation.TENT: (-1, 0, 1, 0, -1, 1, 0, 0, 1),
}

def transform(orientation: Orientation) -> np.ndarray:
    return np.array(TRANSFORMS[orientation], dtype=int).reshape(3, 3)

_INVERSES = {
    Orientation.PORTRAIT_LEFT: Orientation.PORTRAIT_RIGHT,
    Orientation.PORTRAIT_RIGHT: Orientation.PORTRAIT_LEFT,
}

def inverse(orientation: Orientation) -> Orientation:
    """The posture whose transform undoes the one of `orientation`."""
    return _INVERSES.get(orientation, orientation)
