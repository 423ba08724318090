"""Utility functions and helpers."""

import logging
import math
from typing import Any


# Logging setup
def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with standardized configuration.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger


# Value helpers
def is_empty(value: Any) -> bool:
    """Return True for values a grid treats as blank: None, "" and NaN."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, float):
        return math.isnan(value)
    return False


def to_number(value: Any) -> float | int | None:
    """
    Parse *value* as a number.

    Ints and floats pass through, numeric strings are parsed, anything else
    (including NaN and booleans) resolves to None.

    Examples:
        >>> to_number("12")
        12
        >>> to_number("1.5")
        1.5
        >>> to_number("abc") is None
        True
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def to_int(value: Any) -> int | None:
    """Coerce *value* to an int, truncating floats; None when not numeric."""
    number = to_number(value)
    if number is None:
        return None
    return int(number)
