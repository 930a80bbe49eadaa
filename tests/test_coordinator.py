import pytest

from coordinator import OrientationCoordinator
from errors import (
    DeviceActionFailed, DeviceNotFound, DisplayRotationFailed, EnumerationFailed,
    ErrorKind)
from orientation import CalibratedSample, DeviceClass, Orientation, classify
from fakes import FakeCatalog, FakeControls, LAPTOP_DEVICES

IDENTITY = (1, 0, 0, 0, 1, 0, 0, 0, 1)


def make(devices=LAPTOP_DEVICES, failing=(), patterns=None):
    controls = FakeControls(failing)
    return OrientationCoordinator(controls, controls, patterns), controls, FakeCatalog(devices)


def test_portrait_left_end_to_end():
    coord, controls, catalog = make()
    orientation = classify(CalibratedSample.from_raw(-8, 0, 0, scale=1, offset=0))
    assert orientation == Orientation.PORTRAIT_LEFT

    coord.apply(orientation, catalog)

    assert controls.calls == [
        ("rotate", "right"),
        ("disable", "AT Translated Set 2 keyboard"),
        ("disable", "SynPS/2 Synaptics TouchPad"),
        ("disable", "TPPS/2 IBM TrackPoint"),
        ("transform", "Wacom HID 52C2 Pen stylus", (0, 1, 0, -1, 0, 1, 0, 0, 1)),
        ("transform", "ELAN Touchscreen", (0, 1, 0, -1, 0, 1, 0, 0, 1)),
    ]


def test_normal_end_to_end():
    coord, controls, catalog = make()
    orientation = classify(CalibratedSample(0, -9.8, 0))
    assert orientation == Orientation.NORMAL

    coord.apply(orientation, catalog)

    assert controls.calls == [
        ("rotate", "normal"),
        ("enable", "AT Translated Set 2 keyboard"),
        ("enable", "SynPS/2 Synaptics TouchPad"),
        ("enable", "TPPS/2 IBM TrackPoint"),
        ("transform", "Wacom HID 52C2 Pen stylus", IDENTITY),
        ("transform", "ELAN Touchscreen", IDENTITY),
    ]


def test_tent_uses_inverted_screen_and_transform():
    coord, controls, catalog = make()
    coord.apply(Orientation.TENT, catalog)
    assert controls.calls[0] == ("rotate", "inverted")
    assert ("transform", "ELAN Touchscreen", (-1, 0, 1, 0, -1, 1, 0, 0, 1)) in controls.calls


def test_missing_touchpad_stops_before_touch_input():
    devices = [d for d in LAPTOP_DEVICES if "Touch" not in d or "Touchscreen" in d]
    devices = [d for d in devices if "TrackPoint" not in d]
    coord, controls, catalog = make(devices)

    with pytest.raises(DeviceNotFound) as exc:
        coord.apply(Orientation.TABLET, catalog)

    assert exc.value.device_class == DeviceClass.TOUCHPAD
    assert exc.value.kind == ErrorKind.DEVICE_NOT_FOUND
    assert controls.calls == [
        ("rotate", "normal"),
        ("disable", "AT Translated Set 2 keyboard"),
    ]


def test_missing_keyboard():
    coord, controls, catalog = make(["ELAN Touchscreen", "Synaptics TouchPad"])
    with pytest.raises(DeviceNotFound) as exc:
        coord.apply(Orientation.NORMAL, catalog)
    assert exc.value.device_class == DeviceClass.KEYBOARD
    assert controls.calls == [("rotate", "normal")]


def test_missing_touch_input_after_everything_else():
    coord, controls, catalog = make(["AT Translated Set 2 keyboard", "Synaptics TouchPad"])
    with pytest.raises(DeviceNotFound) as exc:
        coord.apply(Orientation.NORMAL, catalog)
    assert exc.value.device_class == DeviceClass.TOUCH_INPUT
    assert len(controls.calls) == 3


def test_display_failure_aborts_everything():
    coord, controls, catalog = make(failing=["rotate"])
    with pytest.raises(DisplayRotationFailed) as exc:
        coord.apply(Orientation.PORTRAIT_RIGHT, catalog)
    assert exc.value.kind == ErrorKind.DISPLAY_ROTATION_FAILED
    assert controls.calls == [("rotate", "left")]
    assert catalog.queries == 0


def test_first_touchpad_failure_aborts_remaining_devices():
    coord, controls, catalog = make(failing=["SynPS/2 Synaptics TouchPad"])
    with pytest.raises(DeviceActionFailed) as exc:
        coord.apply(Orientation.TENT, catalog)
    assert exc.value.device_class == DeviceClass.TOUCHPAD
    assert exc.value.device == "SynPS/2 Synaptics TouchPad"
    assert ("disable", "TPPS/2 IBM TrackPoint") not in controls.calls
    assert not any(call[0] == "transform" for call in controls.calls)


def test_keyboard_failure():
    coord, controls, catalog = make(failing=["AT Translated Set 2 keyboard"])
    with pytest.raises(DeviceActionFailed) as exc:
        coord.apply(Orientation.TABLET, catalog)
    assert exc.value.device_class == DeviceClass.KEYBOARD
    assert controls.calls[-1] == ("disable", "AT Translated Set 2 keyboard")


def test_first_transform_failure_aborts_remaining_devices():
    coord, controls, catalog = make(failing=["transform"])
    with pytest.raises(DeviceActionFailed) as exc:
        coord.apply(Orientation.NORMAL, catalog)
    assert exc.value.device_class == DeviceClass.TOUCH_INPUT
    assert exc.value.device == "Wacom HID 52C2 Pen stylus"
    assert controls.calls[-1][:2] == ("transform", "Wacom HID 52C2 Pen stylus")


def test_each_step_queries_the_catalog_again():
    coord, controls, catalog = make()
    coord.apply(Orientation.NORMAL, catalog)
    assert catalog.queries == 3


def test_enumeration_failure_propagates():
    coord, controls = make()[:2]
    with pytest.raises(EnumerationFailed):
        coord.apply(Orientation.NORMAL, FakeCatalog([], fail=True))
    assert controls.calls == [("rotate", "normal")]


def test_display_rotation_can_be_skipped():
    coord, controls, catalog = make()
    coord.apply(Orientation.TABLET, catalog, rotate_display=False)
    assert not any(call[0] == "rotate" for call in controls.calls)
    assert len(controls.calls) == 5


def test_pattern_override():
    coord, controls, catalog = make(
        ["Apple Internal Keyboard", "bcm5974", "Goodix Capacitive TouchScreen"],
        patterns={DeviceClass.KEYBOARD: ("internal keyboard",),
                  DeviceClass.TOUCHPAD: ("bcm5974",)})
    coord.apply(Orientation.NORMAL, catalog)
    assert controls.calls[1:3] == [("enable", "Apple Internal Keyboard"),
                                   ("enable", "bcm5974")]
