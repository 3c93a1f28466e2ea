r"""
viewstats.stats_engine
======================
Named metrics over projected views and the engine that evaluates them.

This module defines:

- :class:`StatsContext`: a typed, explicit configuration object shared by all metrics.
- :class:`FnMetric`: a frozen adapter that names a metric function.
- :class:`StatsEngine`: an orchestrator that evaluates one or more metrics.

Metric functions have the signature ``fn(view, ctx)`` and wrap the lazy
aggregates of :mod:`viewstats.aggregates`.

See Also
--------
viewstats.view.ProjectedView
    The lazy view every metric consumes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Optional, Protocol, Sequence, TypeVar, Union

import numpy as np

from . import aggregates
from .data import Dataset, PositionWindow
from .utils import as_generator, check_log_base, is_number
from .view import ProjectedView

# Create local logger
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


class NanPolicy(str, Enum):
    r"""
    Strategies for handling non-finite or non-numeric projected values.

    Attributes
    ----------
    propagate : str
        Let invalid values turn the metric into ``nan``.
    omit : str
        Filter invalid values out (lazily) before computing a metric.
    """

    propagate = "propagate"
    omit = "omit"


@dataclass(slots=True)
class StatsContext:
    r"""
    Shared, explicit configuration for metric computations.

    Attributes
    ----------
    log_base : float, default 2.0
        Logarithm base for :func:`entropy_metric` and :func:`mi_metric`.
    nan_policy : {"propagate", "omit"}, default "propagate"
        If ``"omit"``, items whose projected value is not a finite number are
        filtered out before every metric.
    rng : int or numpy.random.Generator, optional
        Seed or Generator used when sampling.
    sample_size : int, optional
        If set, :meth:`StatsEngine.compute` draws a random sample of this size
        (reordering the backing data) before computing.
    other : ProjectedView, optional
        Second sample for two-sample metrics (:func:`correl_metric`, :func:`mi_metric`).
        Paired with the primary view by position; must share its backing
        sequence when :attr:`sample_size` is set.

    Examples
    --------
    >>> ctx = StatsContext(log_base=10, nan_policy=NanPolicy.omit)
    >>> ctx.with_overrides(log_base=2).log_base
    2
    """

    log_base: float = 2.0
    nan_policy: NanPolicy = "propagate"
    rng: Optional[Union[int, np.random.Generator]] = None
    sample_size: Optional[int] = None
    other: Optional[ProjectedView] = None

    def with_overrides(self, **changes) -> "StatsContext":
        r"""
        Return a shallow copy with selected fields replaced.

        Parameters
        ----------
        **changes :
            Field overrides passed to :func:`dataclasses.replace`.
        """
        return replace(self, **changes)

    def get_generators(self) -> np.random.Generator:
        r"""
        Return a NumPy :class:`~numpy.random.Generator` initialized from :attr:`rng`.
        """
        return as_generator(self.rng)

    def __post_init__(self) -> None:
        r"""
        Validate field ranges.

        Raises
        ------
        ValueError
            If any field is outside its allowed range.
        TypeError
            If :attr:`other` is not a projected view.
        """
        check_log_base(self.log_base)
        if self.nan_policy not in ("propagate", "omit"):
            raise ValueError(f"Unknown nan_policy: {self.nan_policy}")
        if self.sample_size is not None and self.sample_size <= 0:
            raise ValueError("sample_size must be > 0")
        if self.other is not None:
            aggregates.require_projected(self.other)
            if not isinstance(self.other, ProjectedView):
                raise TypeError(f"other must be a ProjectedView, got {type(self.other).__name__}")


class Metric(Protocol):
    r"""
    Protocol for metric callables used by :class:`StatsEngine`.

    A metric exposes a ``name`` attribute and is callable as
    ``metric(view: ProjectedView, ctx: StatsContext) -> Any``.
    """

    name: str

    def __call__(self, view: ProjectedView, ctx: StatsContext, /) -> Any: ...


T = TypeVar("T")


@dataclass(frozen=True)
class FnMetric(Generic[T]):
    r"""
    Lightweight adapter that binds a human-readable ``name`` to a metric function.

    Parameters
    ----------
    name : str
        Key under which the metric result is stored in :meth:`StatsEngine.compute`.
    fn : callable
        Function with signature ``fn(view: ProjectedView, ctx: StatsContext) -> T``.
    doc : str, optional
        Short description.

    Examples
    --------
    >>> from viewstats import wrap
    >>> m = FnMetric("sum", lambda v, ctx: v.sum())
    >>> m(wrap([1, 2, 3]), StatsContext())
    6
    """

    name: str
    fn: Callable[[ProjectedView, StatsContext], T]
    doc: str = ""

    def __call__(self, view: ProjectedView, ctx: StatsContext) -> T:
        return self.fn(view, ctx)


def _ensure_ctx(ctx: Any) -> StatsContext:
    r"""
    Normalize arbitrary context inputs into a :class:`StatsContext`.

    Parameters
    ----------
    ctx : Any
        A :class:`StatsContext`, mapping, object with attributes, or ``None``.

    Raises
    ------
    TypeError
        If ``ctx`` cannot be interpreted as configuration data.
    """
    if isinstance(ctx, StatsContext):
        return ctx
    if ctx is None:
        return StatsContext()
    if isinstance(ctx, dict):
        return StatsContext(**ctx)
    try:
        data = dict(vars(ctx))
    except TypeError:
        raise TypeError("ctx must be a StatsContext, dict, None, or an object with attributes")
    return StatsContext(**data)


def _is_finite_number(value: Any) -> bool:
    return is_number(value) and math.isfinite(value)


def _finite_only(view: ProjectedView) -> ProjectedView:
    accessor = view.accessor
    return view.filter(lambda item: _is_finite_number(accessor(item)))


def _drop_invalid_pairs(view: ProjectedView, other: ProjectedView) -> tuple[ProjectedView, ProjectedView]:
    r"""
    Drop the positional pairs where either projected value is not a finite number.

    Both results are :class:`~viewstats.data.PositionWindow` views over the
    original backing sequences, so writes (e.g. median swaps) still land there.
    """
    left, right = view.cursor(), other.cursor()
    kept_left: list[int] = []
    kept_right: list[int] = []
    while left.has_next() and right.has_next():
        a, b = left.advance(), right.advance()
        if _is_finite_number(view.accessor(a)) and _is_finite_number(other.accessor(b)):
            kept_left.append(left.position)
            kept_right.append(right.position)
    logger.debug(f"Kept {len(kept_left)} finite pairs")
    return (
        ProjectedView(PositionWindow(view.data, kept_left), view.accessor),
        ProjectedView(PositionWindow(other.data, kept_right), other.accessor),
    )


def _prepare(
    view: Union[ProjectedView, Dataset], ctx: StatsContext
) -> tuple[ProjectedView, Optional[ProjectedView]]:
    r"""
    Apply sampling and the NaN policy to ``view`` and ``ctx.other``.

    A :class:`~viewstats.data.Dataset` is projected with the identity accessor.

    Sampling reorders the backing sequence, so ``ctx.other`` must share it; it
    is then narrowed to the same sampled window, keeping its own accessor and
    predicate. Under ``nan_policy="omit"`` a second sample of equal size is
    paired by position and a pair is dropped from both sides when either value
    is invalid. Samples of different sizes are filtered independently.

    Returns
    -------
    tuple
        The prepared view and the prepared second sample (``None`` if unset).

    Raises
    ------
    ValueError
        If ``sample_size`` is set and ``ctx.other`` has a different backing
        sequence than ``view``.
    """
    other = ctx.other
    if ctx.sample_size is not None:
        if other is not None and other.data is not view.data:
            raise ValueError("sample_size cannot be combined with a ctx.other over a different backing sequence")
        ds = view if isinstance(view, Dataset) else Dataset(view.data, view.predicate)
        sampled = ds.sample(ctx.sample_size, ctx.get_generators())
        accessor = view.accessor if isinstance(view, ProjectedView) else None
        view = sampled.map(accessor)
        if other is not None:
            other = ProjectedView(sampled.data, other.accessor, other.predicate)
    elif isinstance(view, Dataset):
        view = view.map()

    if ctx.nan_policy == "omit":
        if other is not None and other.size() == view.size():
            view, other = _drop_invalid_pairs(view, other)
        else:
            view = _finite_only(view)
            if other is not None:
                other = _finite_only(other)
    return view, other


def _require_other(ctx: StatsContext, name: str) -> ProjectedView:
    if ctx.other is None:
        raise ValueError(f"{name} requires ctx.other")
    return ctx.other


def size_metric(view: ProjectedView, ctx: StatsContext) -> int:
    """Logical sample size."""
    return view.size()


def sum_metric(view: ProjectedView, ctx: StatsContext) -> float:
    return aggregates.total(view)


def min_metric(view: ProjectedView, ctx: StatsContext) -> float:
    return aggregates.minimum(view)


def max_metric(view: ProjectedView, ctx: StatsContext) -> float:
    return aggregates.maximum(view)


def mean_metric(view: ProjectedView, ctx: StatsContext) -> float:
    return aggregates.mean(view)


def stdev_metric(view: ProjectedView, ctx: StatsContext) -> float:
    return aggregates.stdev(view)


def median_metric(view: ProjectedView, ctx: StatsContext) -> float:
    r"""
    Median by quickselect.

    Notes
    -----
    Reorders the backing sequence in place.
    """
    return aggregates.median(view)


def entropy_metric(view: ProjectedView, ctx: StatsContext) -> float:
    r"""Shannon entropy in base :attr:`StatsContext.log_base`; values are probabilities."""
    return aggregates.entropy(view, ctx.log_base)


def correl_metric(view: ProjectedView, ctx: StatsContext) -> float:
    r"""
    Pearson correlation against :attr:`StatsContext.other`.

    Raises
    ------
    ValueError
        If ``ctx.other`` is missing.
    """
    other = _require_other(ctx, "correl_metric")
    return aggregates.correl(view, other)


def mi_metric(view: ProjectedView, ctx: StatsContext) -> float:
    r"""
    Mutual information against :attr:`StatsContext.other` in base :attr:`StatsContext.log_base`.

    Raises
    ------
    ValueError
        If ``ctx.other`` is missing.
    """
    other = _require_other(ctx, "mi_metric")
    return view.joint(other).mi(ctx.log_base)


class StatsEngine:
    r"""
    Orchestrator that evaluates a set of metrics over a projected view.

    Parameters
    ----------
    metrics : iterable of Metric
        Callables with a ``name`` and signature ``metric(view, ctx)``.

    Notes
    -----
    All metrics receive the *same* view and :class:`StatsContext`. Metrics run in
    registration order; register a reordering metric (median) after any metric
    that pairs items by position (correl, mi).

    Examples
    --------
    >>> from viewstats import wrap
    >>> eng = StatsEngine([FnMetric("mean", mean_metric), FnMetric("stdev", stdev_metric)])
    >>> eng.compute(wrap([1., 2., 3.]))
    {'mean': 2.0, 'stdev': 1.0}
    """

    def __init__(self, metrics: Iterable[Metric]):
        self._metrics = list(metrics)

    def available(self) -> tuple[str, ...]:
        return tuple(m.name for m in self._metrics)

    def compute(
        self,
        view: Union[ProjectedView, Dataset],
        ctx: Optional[StatsContext] = None,
        select: Sequence[str] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        r"""
        Evaluate the registered metrics on ``view``.

        Parameters
        ----------
        view : ProjectedView or Dataset
            Sample to describe. A dataset is projected with the identity accessor.
        ctx : StatsContext, optional
            Context parameters. If None, one is built from ``**kwargs``.
        select : sequence of str, optional
            If given, compute only the metrics with these names.
        **kwargs :
            Used to build a StatsContext if ctx is None.

        Returns
        -------
        dict
            Mapping from metric name to computed value.
        """
        ctx = _ensure_ctx(ctx) if ctx is not None else StatsContext(**kwargs)
        view, other = _prepare(view, ctx)
        if other is not ctx.other:
            ctx = ctx.with_overrides(other=other)

        metrics_to_compute = (
            self._metrics if select is None else [m for m in self._metrics if m.name in set(select)]
        )

        out: dict[str, Any] = {}
        for m in metrics_to_compute:
            try:
                result = m(view, ctx)

                # Filter out empty dicts (metrics that can't compute)
                if isinstance(result, dict) and len(result) == 0:
                    logger.debug(f"Metric '{m.name}' returned empty dict, skipping")
                    continue

                out[m.name] = result

            except ValueError as e:
                if "requires ctx." in str(e):
                    logger.debug(f"Skipping metric {m.name}: {e}")
                    continue
                raise
            except Exception:
                logger.exception(f"Error computing metric {m.name}")
                continue

        return out


def build_default_engine(
    include_selection: bool = True,
    include_information: bool = True,
) -> StatsEngine:
    r"""
    Construct a :class:`StatsEngine` with a practical set of metrics.

    Parameters
    ----------
    include_selection : bool, default True
        Include :func:`median_metric` (reorders the backing data).
    include_information : bool, default True
        Include :func:`entropy_metric`, :func:`correl_metric` and :func:`mi_metric`.
    """
    metrics: list[Metric] = [
        FnMetric[int]("size", size_metric, "Logical sample size"),
        FnMetric[float]("sum", sum_metric, "Sum of values"),
        FnMetric[float]("min", min_metric, "Smallest value"),
        FnMetric[float]("max", max_metric, "Largest value"),
        FnMetric[float]("mean", mean_metric, "Arithmetic mean"),
        FnMetric[float]("stdev", stdev_metric, "Sample standard deviation"),
    ]
    if include_information:
        metrics.extend(
            [
                FnMetric[float]("entropy", entropy_metric, "Shannon entropy of probabilities"),
                FnMetric[float]("correl", correl_metric, "Pearson correlation with ctx.other"),
                FnMetric[float]("mi", mi_metric, "Mutual information with ctx.other"),
            ]
        )
    # median reorders the backing data, so it must run after the paired metrics
    if include_selection:
        metrics.append(FnMetric[float]("median", median_metric, "Median (quickselect, in place)"))
    return StatsEngine(metrics)


# Build a default engine at import time
DEFAULT_ENGINE = build_default_engine(
    include_selection=True,
    include_information=True,
)

__all__ = [
    "NanPolicy",
    "StatsContext",
    "Metric",
    "FnMetric",
    "StatsEngine",
    "size_metric",
    "sum_metric",
    "min_metric",
    "max_metric",
    "mean_metric",
    "stdev_metric",
    "median_metric",
    "entropy_metric",
    "correl_metric",
    "mi_metric",
    "build_default_engine",
    "DEFAULT_ENGINE",
]
