r"""
viewstats.joint
===============

Empirical joint distribution of two positionally paired samples.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import TYPE_CHECKING, Any

from .aggregates import require_projected
from .utils import check_log_base, is_number

if TYPE_CHECKING:
    from .view import ProjectedView

__all__ = ["JointData"]


def _key(value: Any) -> str:
    # 1 and 1.0 must land in the same bucket
    if is_number(value):
        return repr(float(value))
    return str(value)


class JointData:
    r"""
    Two :class:`~viewstats.view.ProjectedView` samples paired by position.

    Pairs are formed up to the size of the shorter sample; the remainder of
    the longer one is ignored.

    Parameters
    ----------
    first, second : ProjectedView
        The paired samples. Their element types may differ.

    Raises
    ------
    TypeError
        If either argument is a raw, unprojected dataset.
    """

    def __init__(self, first: "ProjectedView", second: "ProjectedView"):
        require_projected(first)
        require_projected(second)
        self.first = first
        self.second = second

    def size(self) -> int:
        """Number of pairs."""
        return min(self.first.size(), self.second.size())

    def _frequencies(self) -> tuple[Counter, Counter, Counter, int]:
        pairs: Counter = Counter()
        marg1: Counter = Counter()
        marg2: Counter = Counter()
        total = 0
        for v1, v2 in zip(self.first, self.second):
            k1, k2 = _key(v1), _key(v2)
            pairs[(k1, k2)] += 1
            marg1[k1] += 1
            marg2[k2] += 1
            total += 1
        return pairs, marg1, marg2, total

    def mi(self, base: float = 2) -> float:
        r"""
        Mutual information of the paired samples.

        .. math::
           I = \sum_{(a,b)} p(a,b)\,\log_b \frac{p(a,b)}{p(a)\,p(b)}

        where all probabilities are relative frequencies over the visited pairs.
        Values are bucketed by their canonical string form.

        Parameters
        ----------
        base : float, default 2
            Logarithm base.

        Returns
        -------
        float
            Mutual information; ``0.0`` when there are no pairs.

        Examples
        --------
        >>> from viewstats import wrap
        >>> wrap([1, 2, 3, 4]).joint(wrap([1, 2])).mi(2)
        1.0
        """
        log_base = check_log_base(base)
        pairs, marg1, marg2, total = self._frequencies()
        ans = 0.0
        for (k1, k2), count in pairs.items():
            p12 = count / total
            ans += p12 * math.log(p12 / ((marg1[k1] / total) * (marg2[k2] / total)))
        return ans / log_base
