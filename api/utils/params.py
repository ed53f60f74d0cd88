"""Query-string parsing shared by the blueprints."""
from __future__ import annotations

import math
from typing import Optional, Tuple

from flask import request

from services.exceptions import ValidationFailed
from services.pagination import DEFAULT_LIMIT

TRUE_VALUES = ("1", "true", "yes")
FALSE_VALUES = ("0", "false", "no")


def parse_int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationFailed(f"{name} must be an integer")


def parse_pagination() -> Tuple[int, int]:
    """Raw page/limit; out-of-range values are normalized by the services."""
    return parse_int_arg("page", 1), parse_int_arg("limit", DEFAULT_LIMIT)


def parse_float_arg(
    name: str,
    required: bool = False,
    bounds: Optional[Tuple[float, float]] = None,
) -> Optional[float]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        if required:
            raise ValidationFailed(f"{name} is required")
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValidationFailed(f"{name} must be a number")
    # float() accepts "inf" and "nan"
    if not math.isfinite(value):
        raise ValidationFailed(f"{name} must be a finite number")
    if bounds is not None and not bounds[0] <= value <= bounds[1]:
        raise ValidationFailed(f"{name} must be between {bounds[0]:g} and {bounds[1]:g}")
    return value


def parse_bool_arg(name: str) -> Optional[bool]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    lowered = raw.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValidationFailed(f"{name} must be a boolean")
