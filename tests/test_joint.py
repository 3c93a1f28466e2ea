import math

import pytest

from viewstats import JointData, dataset, wrap

V1 = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12]
V2 = [1, 2, 3, 4, 1, 4, 8, 2, 9, 10, 11, 0]
V3 = [1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1]


class TestMutualInformation:
    """Test mi() on paired samples"""

    def test_common_input(self):
        ans = dataset(V1).map().joint(dataset(V2).map()).mi(2.71828)
        assert ans == pytest.approx(2.13833, abs=5e-5)

    def test_independent_variables(self):
        ans = dataset(V1).map().joint(dataset(V3).map()).mi(2.71828)
        assert ans == pytest.approx(0, abs=5e-5)

    def test_dependent_variables(self):
        ans = dataset(V1).map().joint(dataset(V1).map()).mi(math.e)
        assert ans == pytest.approx(math.log(12))
        assert ans == pytest.approx(2.4849, abs=5e-5)

    def test_dependent_variables_base_2(self):
        assert wrap(V1).joint(wrap(V1)).mi(2) == pytest.approx(math.log2(12))

    def test_different_sizes_truncate(self):
        ans = wrap(V1).joint(wrap([1, 2])).mi(2)
        assert ans == pytest.approx(1, abs=5e-5)

    def test_empty(self):
        assert dataset([]).map().joint(dataset([]).map()).mi(2) == 0

    def test_int_and_float_share_keys(self):
        assert wrap([1, 2]).joint(wrap([1.0, 2.0])).mi(2) == pytest.approx(1.0)

    def test_filtered_views(self, mixed_signs):
        pos = dataset(mixed_signs).filter(lambda v: v > 0).map()
        neg = dataset(mixed_signs).filter(lambda v: v < 0).map(abs)
        joint = pos.joint(neg)
        assert joint.size() == 5
        assert joint.mi(2) == pytest.approx(math.log2(5))

    def test_unprojected_argument_rejected(self):
        with pytest.raises(TypeError, match="map\\(\\)"):
            wrap(V1).joint(dataset(V2))
        with pytest.raises(TypeError):
            JointData(dataset(V1), wrap(V2))

    def test_invalid_base(self):
        with pytest.raises(ValueError):
            wrap(V1).joint(wrap(V2)).mi(1)
