r"""
viewstats.data
==============

Raw (unprojected) data wrappers and the package entry points.

A :class:`Dataset` holds a caller-owned sequence and an optional filter. It
offers no statistics by itself: project it first with :meth:`Dataset.map`
(or one of :meth:`~Dataset.numerize`, :meth:`~Dataset.round`,
:meth:`~Dataset.probs`) to obtain a :class:`~viewstats.view.ProjectedView`.

Examples
--------
>>> from viewstats import dataset
>>> ds = dataset([1, -3, 2, -4, 3, -5, 4, -6, 5, -7]).filter(lambda v: v >= 0)
>>> ds.map().to_list()
[1, 2, 3, 4, 5]
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Callable, Generic, Iterator, MutableSequence, Optional, TypeVar, Union

import numpy as np

from .utils import all_of, as_generator, identity, numerize, round_places
from .view import ProjectedView, SkippingCursor

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

T = TypeVar("T")

__all__ = ["PrefixWindow", "PositionWindow", "Dataset", "dataset", "wrap"]


class PrefixWindow(MutableSequence[T]):
    r"""
    Mutable window over the first ``stop`` slots of a backing sequence.

    Reads and writes go straight to the backing sequence; nothing is copied.
    The window cannot grow or shrink.

    Examples
    --------
    >>> base = [1, 2, 3, 4]
    >>> w = PrefixWindow(base, 2)
    >>> w[1] = 20
    >>> list(w), base
    ([1, 20], [1, 20, 3, 4])
    """

    def __init__(self, data: MutableSequence[T], stop: int):
        if stop < 0 or stop > len(data):
            raise ValueError(f"window stop {stop} outside [0, {len(data)}]")
        self._data = data
        self._stop = stop

    def _check(self, idx: int) -> int:
        if not isinstance(idx, (int, np.integer)):
            raise TypeError(f"{type(self).__name__} indices must be integers")
        if idx < 0:
            idx += self._stop
        if idx < 0 or idx >= self._stop:
            raise IndexError("window index out of range")
        return int(idx)

    def __len__(self) -> int:
        return self._stop

    def __getitem__(self, idx):
        return self._data[self._check(idx)]

    def __setitem__(self, idx, value) -> None:
        self._data[self._check(idx)] = value

    def __delitem__(self, idx) -> None:
        raise TypeError(f"{type(self).__name__} has a fixed size")

    def insert(self, index: int, value: T) -> None:
        raise TypeError(f"{type(self).__name__} has a fixed size")

    def __iter__(self) -> Iterator[T]:
        data = self._data
        for i in range(self._stop):
            yield data[i]

    def __repr__(self) -> str:
        return f"PrefixWindow({list(self)!r})"


class PositionWindow(PrefixWindow[T]):
    r"""
    Mutable window over selected backing positions, in the order given.

    Window slot ``i`` reads and writes ``data[positions[i]]``. Only the
    position list is stored; the items stay in the backing sequence.

    Examples
    --------
    >>> base = [10, 11, 12, 13]
    >>> w = PositionWindow(base, [3, 1])
    >>> w[0] = 30
    >>> list(w), base
    ([30, 11], [10, 11, 12, 30])
    """

    def __init__(self, data: MutableSequence[T], positions):
        positions = [int(p) for p in positions]
        n = len(data)
        for p in positions:
            if p < 0 or p >= n:
                raise IndexError(f"backing position {p} outside [0, {n})")
        self._data = data
        self._positions = positions
        self._stop = len(positions)

    def _check(self, idx: int) -> int:
        return self._positions[super()._check(idx)]

    def __iter__(self) -> Iterator[T]:
        data = self._data
        for p in self._positions:
            yield data[p]

    def __repr__(self) -> str:
        return f"PositionWindow({list(self)!r})"


class Dataset(Generic[T]):
    r"""
    Unprojected wrapper over a caller-owned sequence.

    Parameters
    ----------
    data : MutableSequence
        Backing sequence. Shared, never copied.
    predicate : callable, optional
        Filter selecting the logical members.
    """

    def __init__(self, data: MutableSequence[T], predicate: Optional[Callable[[T], bool]] = None):
        if predicate is not None and not callable(predicate):
            raise TypeError("predicate must be callable")
        self._data = data
        self._predicate = predicate

    def __repr__(self) -> str:
        return f"<Dataset over {len(self._data)} items>"

    @property
    def data(self) -> MutableSequence[T]:
        return self._data

    @property
    def predicate(self) -> Optional[Callable[[T], bool]]:
        return self._predicate

    def filter(self, predicate: Callable[[T], bool]) -> "Dataset[T]":
        r"""
        Narrow the logical members with ``predicate``.

        Predicates compose with a short-circuit AND, evaluated in the order
        they were added.
        """
        if not callable(predicate):
            raise TypeError("predicate must be callable")
        return Dataset(self._data, all_of(self._predicate, predicate))

    def map(self, accessor: Optional[Callable[[T], Any]] = None) -> ProjectedView[T]:
        r"""
        Project the logical members to numbers.

        Parameters
        ----------
        accessor : callable, optional
            Maps an item to its value. Defaults to identity.
        """
        return ProjectedView(self._data, accessor, self._predicate)

    def numerize(self, fallback: float = 0) -> ProjectedView[T]:
        r"""
        Project with :func:`viewstats.utils.numerize`.

        Examples
        --------
        >>> Dataset(["1", "1.5", "foo", {}, None]).numerize().to_list()
        [1.0, 1.5, 0, 0, 0]
        """

        def _convert(item: Any) -> float:
            return numerize(item, fallback)

        return ProjectedView(self._data, _convert, self._predicate)

    def round(self, places: int, accessor: Optional[Callable[[T], Any]] = None) -> ProjectedView[T]:
        r"""
        Project to values rounded to ``places`` decimals.

        Parameters
        ----------
        places : int
            Number of decimals to keep.
        accessor : callable, optional
            Applied before rounding. Defaults to identity.
        """
        if places < 0:
            raise ValueError("places must be >= 0")
        inner = accessor if accessor is not None else identity

        def _convert(item: Any) -> float:
            return round_places(inner(item), places)

        return ProjectedView(self._data, _convert, self._predicate)

    def probs(self, key: Optional[Callable[[T], Any]] = None) -> ProjectedView[float]:
        r"""
        Relative frequencies of ``key(item)`` over the logical members.

        The result carries no mapping back to the keys: it is meant for
        aggregation (e.g. :meth:`~viewstats.view.ProjectedView.entropy`).

        Parameters
        ----------
        key : callable, optional
            Maps an item to a hashable identifier. Defaults to identity.

        Returns
        -------
        ProjectedView
            A view over a fresh list of probabilities, in first-seen order.

        Examples
        --------
        >>> sorted(Dataset(["a", "b", "c", "c"]).probs().to_list())
        [0.25, 0.25, 0.5]
        """
        key = key if key is not None else identity
        counts: Counter = Counter()
        for item in SkippingCursor(self._data, self._predicate):
            counts[key(item)] += 1
        n = sum(counts.values())
        return ProjectedView([c / n for c in counts.values()])

    def sample(
        self,
        size: int,
        rng: Optional[Union[int, np.random.Generator]] = None,
    ) -> "Dataset[T]":
        r"""
        Draw a random subset of ``size`` items by a partial Fisher-Yates shuffle.

        For :math:`i = 0, \dots, size-1` slot :math:`i` is swapped with a slot
        drawn uniformly from :math:`[i, n)`. The shuffled prefix is returned
        as a new dataset over a :class:`PrefixWindow`, without copying.

        Parameters
        ----------
        size : int
            Number of items to draw, in :math:`[1, n]`.
        rng : int or numpy.random.Generator, optional
            Seed or generator for reproducibility.

        Returns
        -------
        Dataset
            Dataset over the first ``size`` backing slots, keeping this
            dataset's filter.

        Raises
        ------
        ValueError
            If ``size`` is outside :math:`[1, n]`.

        Notes
        -----
        The backing sequence is reordered in place. Sampling works on the
        physical sequence; any filter is applied to the sampled items
        afterwards.
        """
        data = self._data
        n = len(data)
        if size <= 0 or size > n:
            raise ValueError(f"invalid sample size {size}: must be between 1 and the size of the dataset ({n})")
        g = as_generator(rng)
        logger.debug(f"Sampling {size} of {n} items")
        for i in range(size):
            j = int(g.integers(i, n))
            data[i], data[j] = data[j], data[i]
        return Dataset(PrefixWindow(data, size), self._predicate)


def dataset(data: MutableSequence[T]) -> Dataset[T]:
    r"""
    Wrap a caller-owned sequence into a :class:`Dataset`.

    Examples
    --------
    >>> dataset([1, 2, 3]).map(lambda v: -v).to_list()
    [-1, -2, -3]
    """
    return Dataset(data)


def wrap(data: MutableSequence[T], accessor: Optional[Callable[[T], Any]] = None) -> ProjectedView[T]:
    r"""
    Project a sequence directly, skipping the :class:`Dataset` step.

    Examples
    --------
    >>> wrap(["a", "b", "c"], ord).sum()
    294
    """
    return ProjectedView(data, accessor)
