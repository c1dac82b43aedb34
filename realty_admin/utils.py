import random
import string
import time

from slugify import slugify


def make_slug(name):
    """Lower-cased, dash separated form of ``name`` used as a secondary key."""
    return slugify(name or '')


def _random_upper(length):
    alphabet = string.ascii_uppercase + string.digits
    return ''.join(random.choice(alphabet) for _ in range(length))


def _epoch_ms():
    return int(time.time() * 1000)


def generate_property_code():
    """PROP + last 6 digits of the epoch in ms + 3 random characters."""
    return f"PROP{str(_epoch_ms())[-6:]}{_random_upper(3)}"


def generate_payment_id():
    return f"PAY_{_epoch_ms()}_{_random_upper(6)}"


def isoformat(value):
    return value.isoformat() if value else None


def parse_bool(value):
    """Parse query-string style booleans; returns None when not given."""
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in ('true', '1', 'yes'):
        return True
    if lowered in ('false', '0', 'no'):
        return False
    return None
