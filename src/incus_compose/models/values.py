"""Primitive value types shared by the entity records."""

import re
from datetime import date
from typing import Annotated, Any, Dict, Optional

from pydantic import BeforeValidator


_SIZE_PATTERN = re.compile(r"^([0-9]+(?:\.[0-9]+)?)[ \t]*([kKMGTPE]i?B|B)?$")
_PERCENT_PATTERN = re.compile(r"^([0-9]+(?:\.[0-9]+)?)%$")
_COUNT_PATTERN = re.compile(r"^[0-9]+$")
_CPU_RANGE_PATTERN = re.compile(r"^([0-9]+)-([0-9]+)$")

SIZE_UNITS: Dict[str, int] = {
    "B": 1,
    "kB": 1000,
    "KB": 1000,
    "MB": 1000 ** 2,
    "GB": 1000 ** 3,
    "TB": 1000 ** 4,
    "PB": 1000 ** 5,
    "EB": 1000 ** 6,
    "KiB": 1024,
    "kiB": 1024,
    "MiB": 1024 ** 2,
    "GiB": 1024 ** 3,
    "TiB": 1024 ** 4,
    "PiB": 1024 ** 5,
    "EiB": 1024 ** 6,
}


def scalar_to_str(value: Any) -> Any:
    """Render a YAML scalar as the string the management API expects.

    Dates keep their ISO form. Mappings, sequences and None are returned
    untouched so that pydantic reports them as a type mismatch.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def stringify_map(value: Any) -> Any:
    """Coerce every scalar value of a passthrough map to a string."""
    if not isinstance(value, dict):
        return value
    return {key: scalar_to_str(item) for key, item in value.items()}


# Quantity written as a string in the document ("2", "512MB", "50%").
Quantity = Annotated[str, BeforeValidator(scalar_to_str)]

# Free-form key/value pairs passed through to the server uninterpreted.
ConfigMap = Annotated[Dict[str, str], BeforeValidator(stringify_map)]


def parse_size(raw: str) -> Optional[int]:
    """Parse a size such as ``512MB`` or ``2GiB`` into bytes.

    Returns None when the value is not a size.
    """
    match = _SIZE_PATTERN.match(raw.strip())
    if not match:
        return None
    number, unit = match.groups()
    return int(float(number) * SIZE_UNITS[unit or "B"])


def parse_percentage(raw: str) -> Optional[float]:
    """Parse ``50%`` into 50.0, or return None."""
    match = _PERCENT_PATTERN.match(raw.strip())
    if not match:
        return None
    return float(match.group(1))


def is_positive_memory(raw: str) -> bool:
    """Check a memory limit: a positive size or a percentage in (0, 100]."""
    percent = parse_percentage(raw)
    if percent is not None:
        return 0 < percent <= 100
    size = parse_size(raw)
    return size is not None and size > 0


def is_positive_cpu(raw: str) -> bool:
    """Check a CPU limit: a count (``2``), a range (``1-3``) or a set (``0,2``)."""
    text = raw.strip()
    if _COUNT_PATTERN.match(text):
        return int(text) > 0
    if not text:
        return False
    for part in text.split(","):
        part = part.strip()
        if _COUNT_PATTERN.match(part):
            continue
        match = _CPU_RANGE_PATTERN.match(part)
        if not match or int(match.group(1)) > int(match.group(2)):
            return False
    return True
