#!/usr/bin/env python3

from argparse import ArgumentParser, RawTextHelpFormatter
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
import logging
import signal
import sys
import time
from coordinator import OrientationCoordinator
from errors import DisplayRotationFailed, RotateError, SensorError
from iio import open_accelerometer
from orientation import (
    DEFAULT_PATTERNS, CalibratedSample, DeviceClass, Orientation, classify)
from xinput import DryRunController, XInputCatalog, XInputController, XRandrController

logger = logging.getLogger("autorotate")

SAMPLE_IDS = ("accel_x", "accel_y", "accel_z", "accel_scale", "accel_offset")

PATTERN_OPTIONS = [
    ("keyboard", DeviceClass.KEYBOARD),
    ("touchpad", DeviceClass.TOUCHPAD),
    ("touch", DeviceClass.TOUCH_INPUT),
]

@dataclass
class Config:
    poll_interval: float = 2.0
    sensor_device_path: Optional[str] = None
    iio_path: str = "/sys/bus/iio/devices"
    patterns: Dict[DeviceClass, Tuple[str, ...]] = field(default_factory=dict)
    dry_run: bool = False
    once: bool = False
    restore: bool = True
    verbose: bool = False

class PollLoop:
    # Longest single sleep, bounds how late a stop request is noticed
    WAKE_STEP = 0.25

    def __init__(self, sensor, catalog, coordinator, interval):
        self.sensor = sensor
        self.catalog = catalog
        self.coordinator = coordinator
        self.interval = interval
        self.kill_now = False
        self.last_orientation = None

    def exit_gracefully(self, signum, frame):
        # Signal handler: only flip the flag, the loop does the rest
        self.kill_now = True

    def read_sample(self):
        values = {value_id: self.sensor.read_named_value(value_id)
                  for value_id in SAMPLE_IDS}
        return CalibratedSample.from_values(values)

    def tick(self):
        sample = self.read_sample()
        orientation = classify(sample)
        changed = orientation != self.last_orientation
        if changed:
            logger.info("Orientation %s (x=%.2f y=%.2f z=%.2f)",
                        orientation.value, sample.x, sample.y, sample.z)
        else:
            logger.debug("Orientation still %s", orientation.value)
        self.last_orientation = orientation
        try:
            self.coordinator.apply(orientation, self.catalog, rotate_display=changed)
        except DisplayRotationFailed:
            self.last_orientation = None
            raise
        return orientation

    def sleep(self):
        deadline = time.monotonic() + self.interval
        while not self.kill_now:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            time.sleep(min(self.WAKE_STEP, remaining))

    def run(self):
        while not self.kill_now:
            try:
                self.tick()
            except RotateError as e:
                logger.error("Tick failed, %s", e)
            self.sleep()
        logger.info("Stopping")

    def restore(self):
        try:
            self.coordinator.apply(Orientation.NORMAL, self.catalog)
        except RotateError as e:
            logger.error("Could not restore normal mode, %s", e)
        else:
            logger.info("Restored normal mode")

def parse_args(argv=None):
    parser = ArgumentParser(
        description="Rotate the screen and toggle input devices of a convertible laptop",
        formatter_class=RawTextHelpFormatter
    )
    parser.add_argument("--interval", type=float, default=Config.poll_interval,
                        help="Seconds between two accelerometer reads (default: %(default)s)")
    parser.add_argument("--device", dest="sensor_device_path",
                        help="IIO device directory of the accelerometer (default: autodetect)")
    parser.add_argument("--iio-path", default=Config.iio_path,
                        help="Where IIO devices are listed (default: %(default)s)")
    for name, device_class in PATTERN_OPTIONS:
        defaults = ", ".join(repr(p) for p in DEFAULT_PATTERNS[device_class])
        parser.add_argument(f"--{name}", action="append", metavar="PATTERN",
                            help=f"Name substring of {device_class.value} devices, "
                                 f"repeatable (default: {defaults})")
    parser.add_argument("--dry-run", action="store_true",
                        help="Log xrandr/xinput commands instead of running them")
    parser.add_argument("--once", action="store_true",
                        help="Apply the current orientation once and exit")
    parser.add_argument("--no-restore", dest="restore", action="store_false",
                        help="Leave devices as they are on exit")
    parser.add_argument("-v", "--verbose", action="store_true")

    ns = parser.parse_args(argv)
    if ns.interval <= 0:
        parser.error("--interval should be positive")
    patterns = {
        device_class: tuple(getattr(ns, name))
        for name, device_class in PATTERN_OPTIONS
        if getattr(ns, name)
    }
    return Config(
        poll_interval=ns.interval,
        sensor_device_path=ns.sensor_device_path,
        iio_path=ns.iio_path,
        patterns=patterns,
        dry_run=ns.dry_run,
        once=ns.once,
        restore=ns.restore,
        verbose=ns.verbose,
    )

def stop_on_signals(loop):
    signal.signal(signal.SIGINT, loop.exit_gracefully)
    signal.signal(signal.SIGTERM, loop.exit_gracefully)

def run_service(config):
    try:
        sensor = open_accelerometer(config.sensor_device_path, config.iio_path)
    except SensorError as e:
        logger.critical("No usable accelerometer, %s", e)
        return 1
    if config.dry_run:
        display = inputs = DryRunController()
    else:
        display, inputs = XRandrController(), XInputController()
    loop = PollLoop(sensor, XInputCatalog(),
                    OrientationCoordinator(display, inputs, config.patterns),
                    config.poll_interval)

    # Only the very first read may be fatal, later ones are per tick
    try:
        loop.read_sample()
    except SensorError as e:
        logger.critical("Cannot read accelerometer, %s", e)
        return 1

    if config.once:
        try:
            loop.tick()
        except RotateError as e:
            logger.error("Failed, %s", e)
            return 1
        return 0

    stop_on_signals(loop)
    try:
        loop.run()
    finally:
        if config.restore:
            loop.restore()
    return 0

def main(argv=None):
    config = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return run_service(config)

if __name__ == "__main__":
    sys.exit(main())
