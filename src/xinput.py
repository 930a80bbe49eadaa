"""
X11 collaborators: xinput for input devices, xrandr for the screen.
"""

from subprocess import run, PIPE, DEVNULL
from shlex import join as shjoin
import logging
from errors import EnumerationFailed, ExecFailed

logger = logging.getLogger(__name__)

TRANSFORM_PROP = "Coordinate Transformation Matrix"

def exec_cmd(args, capture=False):
    logger.debug("Running %s", shjoin(args))
    try:
        # Device names are arbitrary bytes, keep them intact for the argv round trip
        res = run(args, stdout=PIPE if capture else DEVNULL, stderr=PIPE,
                  encoding="utf-8", errors="surrogateescape")
    except OSError as e:
        raise ExecFailed(f"cannot run {args[0]}: {e.strerror or e}") from e
    if res.returncode != 0:
        err = (res.stderr or "").strip()
        raise ExecFailed(f"{shjoin(args)} exited with {res.returncode}"
                         + (f": {err}" if err else ""))
    return res.stdout

class XInputCatalog:
    def list_devices(self):
        try:
            out = exec_cmd(["xinput", "list", "--name-only"], capture=True)
        except ExecFailed as e:
            raise EnumerationFailed(str(e)) from e
        return [line.strip() for line in out.splitlines() if line.strip()]

class XInputController:
    def enable(self, device):
        exec_cmd(["xinput", "enable", device])

    def disable(self, device):
        exec_cmd(["xinput", "disable", device])

    def set_transform(self, device, matrix):
        coeffs = [str(int(v)) for v in matrix.flatten()]
        exec_cmd(["xinput", "set-prop", device, TRANSFORM_PROP, *coeffs])

class XRandrController:
    ROTATIONS = ("normal", "left", "right", "inverted")

    def set_rotation(self, rotation):
        if rotation not in self.ROTATIONS:
            raise ValueError(f"rotation should be one of {self.ROTATIONS}")
        exec_cmd(["xrandr", "--orientation", rotation])

class DryRunController:
    """Logs what XInputController and XRandrController would run."""

    def enable(self, device):
        logger.info("[dry-run] xinput enable %r", device)

    def disable(self, device):
        logger.info("[dry-run] xinput disable %r", device)

    def set_transform(self, device, matrix):
        coeffs = " ".join(str(int(v)) for v in matrix.flatten())
        logger.info("[dry-run] xinput set-prop %r %r %s", device, TRANSFORM_PROP, coeffs)

    def set_rotation(self, rotation):
        logger.info("[dry-run] xrandr --orientation %s", rotation)
