from dataclasses import dataclass, field
from os.path import join, isfile, isdir
from os import listdir
import logging
from errors import SensorUnavailable
from futil import fget, fget_number

logger = logging.getLogger(__name__)

# Value id -> sysfs attribute of an IIO accelerometer
ACCEL_ATTRS = {
    "accel_x": "in_accel_x_raw",
    "accel_y": "in_accel_y_raw",
    "accel_z": "in_accel_z_raw",
    "accel_scale": "in_accel_scale",
    "accel_offset": "in_accel_offset",
}

# Attributes a driver may leave out, with the value they stand for
ACCEL_DEFAULTS = {
    "accel_offset": 0.0,
}

@dataclass
class IIO:
    iio_path: str = "/sys/bus/iio/devices"

    def device_fs_names(self):
        try:
            names = listdir(self.iio_path)
        except OSError as e:
            raise SensorUnavailable(f"cannot list {self.iio_path}: {e.strerror or e}") from e
        return sorted(name for name in names if name.startswith("iio:"))

    def devices(self):
        return [IIODevice(join(self.iio_path, fs_name))
                for fs_name in self.device_fs_names()]

    def accelerometers(self):
        return [dev for dev in self.devices() if dev.has_attr(ACCEL_ATTRS["accel_x"])]

    def find_accelerometer(self):
        accels = self.accelerometers()
        if not accels:
            raise SensorUnavailable(f"no accelerometer under {self.iio_path}")
        if len(accels) > 1:
            logger.warning("Found %d accelerometers, using %s",
                           len(accels), accels[0].path)
        return accels[0]

@dataclass
class IIODevice:
    path: str
    _missing: set = field(default_factory=set, init=False, repr=False, compare=False)

    def name(self):
        try:
            return fget(join(self.path, "name"))
        except SensorUnavailable:
            return None

    def has_attr(self, attr):
        return isfile(join(self.path, attr))

    def read_named_value(self, value_id):
        attr = ACCEL_ATTRS[value_id]
        if value_id in ACCEL_DEFAULTS and not self.has_attr(attr):
            if value_id not in self._missing:
                logger.debug("%s has no %s, assuming %s",
                             self.path, attr, ACCEL_DEFAULTS[value_id])
                self._missing.add(value_id)
            return ACCEL_DEFAULTS[value_id]
        return fget_number(join(self.path, attr))

def open_accelerometer(device_path=None, iio_path="/sys/bus/iio/devices"):
    """Use the IIO device at `device_path`, or the first accelerometer found."""
    if device_path is None:
        dev = IIO(iio_path).find_accelerometer()
    elif isdir(device_path):
        dev = IIODevice(device_path)
    else:
        raise SensorUnavailable(f"no such IIO device: {device_path}")
    logger.info("Using accelerometer %s (%s)", dev.path, dev.name() or "unnamed")
    return dev
