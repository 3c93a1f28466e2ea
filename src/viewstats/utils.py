r"""
viewstats.utils
===============

Small helpers shared by views, datasets and the stats engine.

This module provides:

- :func:`is_number`: the "valid number" test used by every aggregate.
- :func:`numerize` / :func:`round_places`: accessor building blocks.
- :func:`all_of`: conjunctive predicate composition.
- :func:`as_generator`: normalize seeds into :class:`numpy.random.Generator`.
"""

from __future__ import annotations

import math
import numbers
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Optional, Union

import numpy as np


Predicate = Callable[[Any], bool]

__all__ = [
    "identity",
    "is_number",
    "numerize",
    "round_places",
    "all_of",
    "as_generator",
    "check_log_base",
]


def identity(x):
    return x


def is_number(x: Any) -> bool:
    r"""
    Return ``True`` for real numbers (``int``, ``float``, NumPy scalars).

    Booleans are rejected even though :class:`bool` subclasses :class:`int`.
    NaN counts as a number; it propagates through arithmetic on its own.

    Examples
    --------
    >>> is_number(3), is_number(float("nan")), is_number("3"), is_number(True)
    (True, True, False, False)
    """
    if isinstance(x, (bool, np.bool_)):
        return False
    return isinstance(x, numbers.Real)


def numerize(value: Any, fallback: float = 0) -> float:
    r"""
    Coerce heterogeneous input into a number.

    Parameters
    ----------
    value : Any
        Number, numeric-looking string, or anything else.
    fallback : float, default 0
        Returned for malformed strings, ``None``, booleans and other objects.

    Returns
    -------
    float
        ``value`` itself for numbers, the parsed value for numeric strings,
        ``fallback`` otherwise.

    Examples
    --------
    >>> [numerize(v) for v in ["1", "1.5", "foo", {}, None]]
    [1.0, 1.5, 0, 0, 0]
    """
    if is_number(value):
        return value
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return fallback
        return fallback if math.isnan(parsed) else parsed
    return fallback


def round_places(value: float, places: int) -> float:
    r"""
    Round ``value`` to ``places`` decimals, ties away from zero.

    Rounding operates on the exact binary value of the float, so ``1.45``
    (stored slightly below 1.45) becomes ``1.4`` while ``0.05`` becomes ``0.1``.
    Non-finite input is returned unchanged.

    Examples
    --------
    >>> round_places(1.45, 1), round_places(0.05, 1), round_places(2.5, 0)
    (1.4, 0.1, 3.0)
    """
    if places < 0:
        raise ValueError("places must be >= 0")
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(float(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def all_of(first: Optional[Predicate], second: Optional[Predicate]) -> Optional[Predicate]:
    r"""
    Combine two predicates with a short-circuit logical AND.

    ``second`` is evaluated only when ``first`` holds. ``None`` stands for a
    predicate that accepts everything, so ``all_of(None, p) is p``.
    """
    if first is None:
        return second
    if second is None:
        return first

    def _both(item) -> bool:
        return bool(first(item)) and bool(second(item))

    return _both


def as_generator(rng: Optional[Union[int, np.random.Generator]] = None) -> np.random.Generator:
    r"""
    Return a :class:`numpy.random.Generator` for ``rng``.

    Parameters
    ----------
    rng : int, numpy.random.Generator or None
        A generator is returned as-is, an integer seeds a new one, ``None``
        draws fresh OS entropy.
    """
    if isinstance(rng, np.random.Generator):
        return rng
    if isinstance(rng, (int, np.integer)):
        return np.random.default_rng(int(rng))
    return np.random.default_rng()


def check_log_base(base: float) -> float:
    """Return ``ln(base)``, rejecting bases where the logarithm is undefined or zero."""
    if not is_number(base) or not base > 0 or base == 1:
        raise ValueError(f"logarithm base must be positive and != 1, got {base!r}")
    return math.log(base)
