from errors import SensorUnavailable, SensorUnparseable

def fget(path, strip=True):
    try:
        with open(path, 'r') as f:
            res = f.read()
    except OSError as e:
        raise SensorUnavailable(f"cannot read {path}: {e.strerror or e}") from e
    return res.strip() if strip else res

def parse_number(text, path=None):
    """Parse a sysfs value as a float, falling back to an integer."""
    try:
        return float(text)
    except ValueError:
        pass
    try:
        return float(int(text))
    except ValueError:
        where = f" in {path}" if path else ""
        raise SensorUnparseable(f"not a number{where}: {text!r}") from None

def fget_number(path):
    return parse_number(fget(path), path)
