r"""
viewstats.view
==============

Lazy, filtered, projected access to a caller-owned backing sequence.

This module defines:

- :class:`SkippingCursor`: a forward-only cursor yielding the backing items
  that satisfy a predicate.
- :class:`DataModifier`: translates logical (post-filter) indices into
  physical ones and swaps backing items in place.
- :class:`ProjectedView`: couples a backing sequence, an accessor and an
  optional predicate, and exposes the statistics of
  :mod:`viewstats.aggregates` without copying the data.

Logical vs. physical indices
----------------------------

With a predicate ``p`` active, logical index :math:`i` refers to the
:math:`i`-th backing item (in original order) for which ``p`` holds. Without
a predicate both index spaces coincide.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Generic, Iterator, MutableSequence, Optional, TypeVar

import numpy as np

from . import aggregates
from .utils import all_of, identity

if TYPE_CHECKING:
    from .joint import JointData

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

T = TypeVar("T")

__all__ = ["SkippingCursor", "DataModifier", "ProjectedView"]


class SkippingCursor(Generic[T]):
    r"""
    Single-pass cursor over the backing items accepted by ``predicate``.

    Parameters
    ----------
    data : MutableSequence
        Backing sequence.
    predicate : callable, optional
        Inclusion test; ``None`` accepts every item.

    Notes
    -----
    :meth:`has_next` may be called any number of times without moving the
    cursor. The cursor is not restartable; build a new one to rescan.

    Examples
    --------
    >>> cur = SkippingCursor([1, -2, 3], lambda v: v > 0)
    >>> cur.has_next(), cur.has_next(), cur.advance(), cur.advance(), cur.has_next()
    (True, True, 1, 3, False)
    """

    __slots__ = ("_data", "_predicate", "_next", "_ready", "position")

    def __init__(self, data: MutableSequence[T], predicate: Optional[Callable[[T], bool]] = None):
        self._data = data
        self._predicate = predicate
        self._next = 0
        self._ready = False  # _next already points at an accepted item
        self.position = -1  # physical index of the last returned item

    def has_next(self) -> bool:
        r"""Move to the next accepted item (if not there already) and report whether it exists."""
        if self._ready:
            return True
        data, pred = self._data, self._predicate
        n = len(data)
        if pred is not None:
            while self._next < n and not pred(data[self._next]):
                self._next += 1
        self._ready = self._next < n
        return self._ready

    def advance(self) -> T:
        r"""
        Return the next accepted item and move past it.

        Raises
        ------
        StopIteration
            When no accepted item remains.
        """
        if not self.has_next():
            raise StopIteration
        self.position = self._next
        self._next += 1
        self._ready = False
        return self._data[self.position]

    def __iter__(self) -> "SkippingCursor[T]":
        return self

    def __next__(self) -> T:
        return self.advance()


class DataModifier(Generic[T]):
    r"""
    In-place swapper addressing the backing sequence through logical indices.

    Parameters
    ----------
    data : MutableSequence
        Backing sequence, modified in place.
    predicate : callable, optional
        The predicate of the view whose logical indices are used.

    Examples
    --------
    >>> items = [1, -3, 2, -4, 3, -5, 4, -6, 5, -7]
    >>> DataModifier(items, lambda v: v >= 0).swap(0, 4)
    >>> items
    [5, -3, 2, -4, 3, -5, 4, -6, 1, -7]
    """

    def __init__(self, data: MutableSequence[T], predicate: Optional[Callable[[T], bool]] = None):
        self._data = data
        self._predicate = predicate

    def _resolve(self, *logical: int) -> list[int]:
        # logical must be sorted ascending
        positions: list[int] = []
        if self._predicate is None:
            n = len(self._data)
            for idx in logical:
                if idx < 0 or idx >= n:
                    raise IndexError(f"index out of bounds: {idx} (size {n})")
                positions.append(idx)
            return positions

        if logical[0] >= 0:
            wanted = iter(logical)
            target = next(wanted)
            counter = 0
            cursor = SkippingCursor(self._data, self._predicate)
            while cursor.has_next():
                cursor.advance()
                while counter == target:
                    positions.append(cursor.position)
                    target = next(wanted, None)
                if target is None:
                    return positions
                counter += 1
        raise IndexError(f"invalid index: {logical} does not resolve under the active predicate")

    def physical_index(self, idx: int) -> int:
        r"""
        Return the backing position of logical index ``idx``.

        Raises
        ------
        IndexError
            If ``idx`` does not resolve to a backing position.
        """
        return self._resolve(idx)[0]

    def swap(self, idx1: int, idx2: int) -> None:
        r"""
        Swap the items at logical positions ``idx1`` and ``idx2``.

        Swapping a position with itself is a no-op and never raises, even for
        positions that would not resolve.

        Raises
        ------
        IndexError
            If either index is out of bounds (no predicate) or does not resolve
            under the active predicate.
        """
        if idx1 == idx2:
            return
        lo, hi = self._resolve(*sorted((idx1, idx2)))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Swapping logical {idx1}, {idx2} at backing positions {lo}, {hi}")
        data = self._data
        data[lo], data[hi] = data[hi], data[lo]


class ProjectedView(Generic[T]):
    r"""
    Filtered, numerically projected view of a backing sequence.

    Parameters
    ----------
    data : MutableSequence
        Backing sequence. Never copied; shared with every view built over it.
    accessor : callable, optional
        Maps an item to its numeric value. Must be pure. Defaults to identity.
    predicate : callable, optional
        Selects the logical members. ``None`` keeps every item.

    Notes
    -----
    :meth:`median` reorders the backing sequence as a side effect. Every view
    sharing that sequence observes the new order.

    Examples
    --------
    >>> v = ProjectedView([("a", 1), ("b", -2), ("c", 3)], lambda t: t[1], lambda t: t[1] > 0)
    >>> v.size(), v.get(1), v.sum()
    (2, 3, 4)
    """

    def __init__(
        self,
        data: MutableSequence[T],
        accessor: Optional[Callable[[T], Any]] = None,
        predicate: Optional[Callable[[T], bool]] = None,
    ):
        if accessor is not None and not callable(accessor):
            raise TypeError("accessor must be callable")
        if predicate is not None and not callable(predicate):
            raise TypeError("predicate must be callable")
        self._data = data
        self._accessor = accessor if accessor is not None else identity
        self._predicate = predicate

    def __repr__(self) -> str:
        filtered = "filtered" if self._predicate is not None else "unfiltered"
        return f"<ProjectedView over {len(self._data)} items, {filtered}>"

    @property
    def data(self) -> MutableSequence[T]:
        return self._data

    @property
    def accessor(self) -> Callable[[T], Any]:
        return self._accessor

    @property
    def predicate(self) -> Optional[Callable[[T], bool]]:
        return self._predicate

    def cursor(self) -> SkippingCursor[T]:
        """Return a fresh cursor over the logical (raw, unprojected) items."""
        return SkippingCursor(self._data, self._predicate)

    def modifier(self) -> DataModifier[T]:
        """Return a transient swapper bound to this view's backing sequence and predicate."""
        return DataModifier(self._data, self._predicate)

    def filter(self, predicate: Callable[[T], bool]) -> "ProjectedView[T]":
        r"""Return a view over the same data, narrowed by ``predicate`` (evaluated second)."""
        return ProjectedView(self._data, self._accessor, all_of(self._predicate, predicate))

    # access -----------------------------------------------------------------

    def size(self) -> int:
        r"""Number of logical items. O(1) without a predicate, O(n) otherwise."""
        if self._predicate is None:
            return len(self._data)
        return sum(1 for _ in self.cursor())

    def __len__(self) -> int:
        return self.size()

    def get(self, idx: int) -> Any:
        r"""
        Projected value at logical position ``idx``.

        Raises
        ------
        IndexError
            If ``idx`` is negative or not smaller than :meth:`size`.
        """
        if idx < 0:
            raise IndexError(f"index out of range: {idx}")
        if self._predicate is None:
            if idx >= len(self._data):
                raise IndexError(f"index out of range: {idx}")
            return self._accessor(self._data[idx])
        for i, item in enumerate(self.cursor()):
            if i == idx:
                return self._accessor(item)
        raise IndexError(f"index out of range: {idx}")

    def __getitem__(self, idx: int) -> Any:
        return self.get(idx)

    def __iter__(self) -> Iterator[Any]:
        accessor = self._accessor
        for item in self.cursor():
            yield accessor(item)

    def each(self, fn: Callable[[Any, int], Any]) -> None:
        r"""
        Call ``fn(value, index)`` for each logical item in order.

        Iteration stops as soon as ``fn`` returns ``False``; any other return
        value (including ``None``) continues.
        """
        for i, value in enumerate(self):
            if fn(value, i) is False:
                break

    def to_list(self) -> list:
        """Materialize the projected logical items."""
        return list(self)

    def to_array(self) -> np.ndarray:
        """Materialize the projected logical items as a float64 array."""
        return np.asarray(self.to_list(), dtype=float)

    # statistics -------------------------------------------------------------

    def sum(self) -> float:
        return aggregates.total(self)

    def max(self) -> float:
        return aggregates.maximum(self)

    def min(self) -> float:
        return aggregates.minimum(self)

    def mean(self) -> float:
        return aggregates.mean(self)

    def stdev(self) -> float:
        return aggregates.stdev(self)

    def median(self) -> float:
        """Median via quickselect. Reorders the backing sequence in place."""
        return aggregates.median(self)

    def entropy(self, base: float = 2) -> float:
        return aggregates.entropy(self, base)

    def correl(self, other: "ProjectedView") -> float:
        return aggregates.correl(self, other)

    def joint(self, other: "ProjectedView") -> "JointData":
        r"""Pair this view with ``other`` positionally (see :class:`~viewstats.joint.JointData`)."""
        from .joint import JointData

        return JointData(self, other)
