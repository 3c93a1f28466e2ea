r"""
viewstats.aggregates
====================

Aggregate statistics over a :class:`~viewstats.view.ProjectedView`.

Every function reads the view lazily, one logical item at a time, and never
builds a filtered copy. Invalid data (a projected value that is not a real
number) yields ``nan`` rather than an exception; usage errors raise.

Common metrics include :func:`total`, :func:`maximum`, :func:`minimum`,
:func:`mean`, :func:`stdev`, :func:`correl`, :func:`entropy` and
:func:`median`.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any, Callable

from scipy.special import xlogy

from .utils import check_log_base, is_number

if TYPE_CHECKING:
    from .view import ProjectedView

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

NAN = float("nan")

__all__ = [
    "total",
    "maximum",
    "minimum",
    "mean",
    "stdev",
    "correl",
    "entropy",
    "median",
    "require_projected",
]


def require_projected(other: Any) -> None:
    r"""
    Reject raw :class:`~viewstats.data.Dataset` arguments.

    Raises
    ------
    TypeError
        If ``other`` has not been projected with ``map()`` (or a sibling).
    """
    from .data import Dataset

    if isinstance(other, Dataset):
        raise TypeError("argument is not projected: apply map() to the argument first")


def total(view: "ProjectedView") -> float:
    r"""
    Sum of the projected values.

    Returns
    -------
    float
        :math:`\sum_i x_i`; ``0`` for an empty view and ``nan`` as soon as a
        non-number is met.

    Examples
    --------
    >>> from viewstats import wrap
    >>> total(wrap([1, 2, 3.5]))
    6.5
    """
    acc = 0
    for x in view:
        if not is_number(x):
            return NAN
        acc += x
    return acc


def _extreme(view: "ProjectedView", better: Callable[[Any, Any], bool]) -> float:
    values = iter(view)
    best = next(values, None)
    if best is None or not is_number(best):
        return NAN
    for x in values:
        if not is_number(x):
            return NAN
        if better(x, best):
            best = x
    return best


def maximum(view: "ProjectedView") -> float:
    r"""Largest projected value; ``nan`` for an empty view or invalid data."""
    return _extreme(view, lambda x, best: x > best)


def minimum(view: "ProjectedView") -> float:
    r"""Smallest projected value; ``nan`` for an empty view or invalid data."""
    return _extreme(view, lambda x, best: x < best)


def _mean_and_size(view: "ProjectedView") -> tuple[float, int]:
    acc = 0
    n = 0
    for x in view:
        if not is_number(x):
            return NAN, n
        acc += x
        n += 1
    return (acc / n if n > 0 else NAN), n


def mean(view: "ProjectedView") -> float:
    r"""
    Arithmetic mean :math:`\bar X = \frac{1}{n}\sum_i x_i`.

    Sum and size are accumulated in the same pass. Returns ``nan`` for an
    empty view or invalid data.
    """
    return _mean_and_size(view)[0]


def stdev(view: "ProjectedView") -> float:
    r"""
    Sample standard deviation with Bessel correction.

    Returns
    -------
    float
        :math:`s = \sqrt{\frac{1}{n-1}\sum_i (x_i-\bar X)^2}`, or ``nan`` when
        the mean is undefined or :math:`n \le 1`.

    Examples
    --------
    >>> from viewstats import wrap
    >>> round(stdev(wrap([1, 2, 1, 2, 1, 2])), 4)
    0.5477
    """
    mu, n = _mean_and_size(view)
    if math.isnan(mu) or n <= 1:
        return NAN
    acc = 0.0
    for x in view:
        acc += (x - mu) * (x - mu)
    return math.sqrt(acc / (n - 1))


def correl(view: "ProjectedView", other: "ProjectedView") -> float:
    r"""
    Pearson product-moment correlation coefficient.

    .. math::
       r = \frac{\sum_i (a_i-\bar a)(b_i-\bar b)}
                {\sqrt{\sum_i (a_i-\bar a)^2\,\sum_i (b_i-\bar b)^2}}

    Parameters
    ----------
    view, other : ProjectedView
        Samples of the same logical size. Sizes are never truncated.

    Returns
    -------
    float
        ``nan`` if the sizes differ, either sample is empty or invalid, or
        either sample has zero variance.

    Raises
    ------
    TypeError
        If ``other`` is a raw, unprojected dataset.
    """
    require_projected(other)
    m1, n1 = _mean_and_size(view)
    m2, n2 = _mean_and_size(other)
    if n1 != n2 or math.isnan(m1) or math.isnan(m2):
        return NAN
    numerator = 0.0
    denom1 = 0.0
    denom2 = 0.0
    for a, b in zip(view, other):
        da = a - m1
        db = b - m2
        numerator += da * db
        denom1 += da * da
        denom2 += db * db
    denominator = math.sqrt(denom1 * denom2)
    if denominator == 0:
        return NAN
    return numerator / denominator


def entropy(view: "ProjectedView", base: float = 2) -> float:
    r"""
    Shannon entropy of a list of probabilities.

    .. math::
       H = -\sum_i p_i \log_b p_i

    Zero probabilities contribute nothing (:math:`0 \log 0 = 0`).

    Parameters
    ----------
    view : ProjectedView
        Probabilities in :math:`[0, 1]`.
    base : float, default 2
        Logarithm base.

    Returns
    -------
    float
        Entropy, or ``nan`` if any value is not a number in :math:`[0, 1]`.

    Raises
    ------
    ValueError
        If ``base`` is not positive or equals 1.

    Examples
    --------
    >>> from viewstats import wrap
    >>> entropy(wrap([0.5, 0.25, 0.25]), 2)
    1.5
    """
    log_base = check_log_base(base)
    acc = 0.0
    for p in view:
        if not is_number(p) or p < 0 or p > 1:
            return NAN
        acc += float(xlogy(p, p))
    return -acc / log_base


def _partition(view: "ProjectedView", swap: Callable[[int, int], None], left: int, right: int, pivot: int) -> int:
    pivot_value = view.get(pivot)
    store = left
    swap(pivot, right)
    for i in range(left, right + 1):
        if view.get(i) < pivot_value:
            swap(i, store)
            store += 1
    swap(right, store)
    return store


def _quickselect(view: "ProjectedView", swap: Callable[[int, int], None], size: int, k: int) -> float:
    left = 0
    right = size - 1
    while True:
        if left == right:
            return view.get(left)
        pivot = _partition(view, swap, left, right, (left + right) // 2)
        if k == pivot:
            return view.get(k)
        elif k < pivot:
            right = pivot - 1
        else:
            left = pivot + 1


def median(view: "ProjectedView") -> float:
    r"""
    Median computed by quickselect, without sorting or copying.

    Uses Lomuto partitioning around the middle logical index of the current
    range. Swaps go through a :class:`~viewstats.view.DataModifier`, so the
    **backing sequence is reordered in place** (but not sorted).

    Returns
    -------
    float
        The order statistic :math:`x_{(n/2)}` for odd :math:`n`, the mean of
        :math:`x_{(n/2-1)}` and :math:`x_{(n/2)}` for even :math:`n`; ``nan``
        for an empty view or when any value is not a (non-NaN) number.
    """
    size = 0
    for x in view:
        if not is_number(x) or math.isnan(x):
            return NAN
        size += 1
    if size == 0:
        return NAN

    swap = view.modifier().swap
    half = size // 2
    logger.debug(f"Median selection over {size} items (order statistic {half})")
    m = _quickselect(view, swap, size, half)
    if size % 2 == 0:
        m2 = _quickselect(view, swap, size, half - 1)
        return (m2 + m) / 2
    return m
