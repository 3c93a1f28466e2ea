import logging

import numpy as np
import pytest

from viewstats import DataModifier, ProjectedView, SkippingCursor, dataset, wrap


class TestSkippingCursor:
    """Test the lazy filtering cursor"""

    def test_yields_only_accepted_items(self, mixed_signs):
        cur = SkippingCursor(mixed_signs, lambda v: v >= 0)
        assert list(cur) == [1, 2, 3, 4, 5]

    def test_has_next_is_idempotent(self):
        cur = SkippingCursor([-1, -2, 7, -3, 8], lambda v: v > 0)
        assert cur.has_next()
        assert cur.has_next()
        assert cur.advance() == 7
        assert cur.position == 2
        assert cur.has_next()
        assert cur.has_next()
        assert cur.advance() == 8
        assert cur.position == 4
        assert not cur.has_next()

    def test_exhausted_cursor_raises_stop_iteration(self):
        cur = SkippingCursor([], None)
        assert not cur.has_next()
        with pytest.raises(StopIteration):
            cur.advance()

    def test_without_predicate_visits_everything(self):
        assert list(SkippingCursor([3, None, "x"])) == [3, None, "x"]

    def test_not_restartable(self):
        cur = SkippingCursor([1, 2, 3])
        assert list(cur) == [1, 2, 3]
        assert list(cur) == []

    def test_predicate_evaluated_once_per_item_on_full_scan(self):
        seen = []

        def pred(v):
            seen.append(v)
            return v % 2 == 0

        cur = SkippingCursor([1, 2, 3, 4], pred)
        while cur.has_next():
            cur.has_next()
            cur.advance()
        assert seen == [1, 2, 3, 4]


class TestProjectedViewAccess:
    """Test size/get/each/materialization"""

    def test_get_applies_accessor(self):
        view = dataset([1, 2, 3]).map(lambda v: -v)
        assert [view.get(i) for i in range(3)] == [-1, -2, -3]

    def test_default_accessor_is_identity(self):
        ans = []
        dataset([1, 2, 3]).map().each(lambda v, i: ans.append(v))
        assert ans == [1, 2, 3]

    def test_each_passes_values_and_indices(self):
        view = wrap(["a", "b", "c"], ord)
        values, idx = [], []

        def collect(v, i):
            values.append(v)
            idx.append(i)

        view.each(collect)
        assert values == [97, 98, 99]
        assert idx == [0, 1, 2]

    def test_each_stops_on_false(self, counting_accessor):
        view = wrap([0, 1, 2, 3, 4], counting_accessor)
        ans = []

        def collect(v, i):
            ans.append(v)
            if i >= 2:
                return False

        view.each(collect)
        assert ans == [0, 1, 2]
        assert counting_accessor.calls == 3

    def test_each_continues_on_falsy_non_false(self):
        ans = []
        wrap([1, 2, 3]).each(lambda v, i: ans.append(v) or 0)
        assert ans == [1, 2, 3]

    def test_size_and_len(self, mixed_signs):
        assert wrap(mixed_signs).size() == 10
        view = dataset(mixed_signs).filter(lambda v: v >= 0).map()
        assert view.size() == 5
        assert len(view) == 5
        assert wrap([]).size() == 0

    def test_filtered_get_matches_list_filter(self):
        items = [78, 5, 0, 43, 3, 97, 23, 5, 68, 5, 8, 4, 44, 7, 34, 2, 89, 6, 82, 83]
        expected = [v for v in items if v % 2 == 0]
        view = dataset(items).filter(lambda v: v % 2 == 0).map()
        for i, value in enumerate(expected):
            assert view.get(i) == value
            assert view[i] == value

    @pytest.mark.parametrize("idx", [-1, 5, 100])
    def test_get_out_of_range_raises(self, mixed_signs, idx):
        view = dataset(mixed_signs).filter(lambda v: v >= 0).map()
        with pytest.raises(IndexError, match="out of range"):
            view.get(idx)

    def test_get_out_of_range_unfiltered(self):
        with pytest.raises(IndexError):
            wrap([1, 2]).get(2)
        with pytest.raises(IndexError):
            wrap([1, 2]).get(-1)
        with pytest.raises(IndexError):
            wrap([]).get(0)

    def test_to_list_and_to_array(self, mixed_signs):
        view = dataset(mixed_signs).filter(lambda v: v >= 0).map(lambda v: v * 10)
        assert view.to_list() == [10, 20, 30, 40, 50]
        arr = view.to_array()
        assert isinstance(arr, np.ndarray)
        assert arr.dtype == np.float64
        np.testing.assert_array_equal(arr, [10.0, 20.0, 30.0, 40.0, 50.0])

    def test_view_never_copies(self):
        items = [3, 1, 2]
        view = wrap(items)
        assert view.data is items
        items[0] = 30
        assert view.get(0) == 30

    def test_non_callable_arguments_rejected(self):
        with pytest.raises(TypeError, match="accessor"):
            ProjectedView([1], accessor=5)
        with pytest.raises(TypeError, match="predicate"):
            ProjectedView([1], predicate="x")

    def test_view_filter_composes(self):
        items = [10, 12, 32, 46, 55, 71, 74, 87, 93, 106, 126, 129, 136, 138, 148, 172, 177, 186, 191, 192]
        view = wrap(items).filter(lambda x: x % 2 == 0).filter(lambda x: x > 100)
        assert view.to_list() == [106, 126, 136, 138, 148, 172, 186, 192]


class TestDataModifier:
    """Test logical-to-physical swapping"""

    def test_swap_under_filter(self, mixed_signs):
        keep = lambda x: x >= 0  # noqa: E731
        dm = DataModifier(mixed_signs, keep)
        dm.swap(0, 4)
        assert dataset(mixed_signs).filter(keep).map().to_list() == [5, 2, 3, 4, 1]
        # negatives untouched
        assert [v for v in mixed_signs if v < 0] == [-3, -4, -5, -6, -7]

    def test_swap_order_is_normalized(self, mixed_signs):
        a = list(mixed_signs)
        b = list(mixed_signs)
        DataModifier(a, lambda x: x >= 0).swap(1, 3)
        DataModifier(b, lambda x: x >= 0).swap(3, 1)
        assert a == b == [1, -3, 4, -4, 3, -5, 2, -6, 5, -7]

    def test_swap_without_predicate(self):
        items = [1, 2, 3]
        DataModifier(items).swap(2, 0)
        assert items == [3, 2, 1]

    @pytest.mark.parametrize("idx", [0, 3, 99, -1])
    def test_self_swap_never_fails(self, idx):
        items = []
        DataModifier(items, lambda x: x >= 0).swap(idx, idx)
        DataModifier(items).swap(idx, idx)
        assert items == []

    def test_invalid_logical_index_under_predicate(self, mixed_signs):
        dm = DataModifier(mixed_signs, lambda x: x >= 0)
        with pytest.raises(IndexError, match="invalid index"):
            dm.swap(0, 5)
        with pytest.raises(IndexError, match="invalid index"):
            dm.swap(-1, 2)
        assert mixed_signs == [1, -3, 2, -4, 3, -5, 4, -6, 5, -7]

    def test_swap_logs_backing_positions(self, mixed_signs, caplog):
        caplog.set_level(logging.DEBUG, logger="viewstats.view")
        DataModifier(mixed_signs, lambda x: x >= 0).swap(4, 0)
        assert "backing positions 0, 8" in caplog.text

    def test_out_of_bounds_without_predicate(self):
        with pytest.raises(IndexError, match="out of bounds"):
            DataModifier([1, 2]).swap(0, 2)

    def test_empty_backing_sequence_fails(self):
        with pytest.raises(IndexError):
            DataModifier([], lambda x: x >= 0).swap(0, 4)
        with pytest.raises(IndexError):
            DataModifier([]).swap(0, 1)

    def test_physical_index(self, mixed_signs):
        dm = DataModifier(mixed_signs, lambda x: x >= 0)
        assert [dm.physical_index(i) for i in range(5)] == [0, 2, 4, 6, 8]
        with pytest.raises(IndexError):
            dm.physical_index(5)

    def test_swap_visible_through_other_views(self):
        items = [5, 6, 7, 8]
        wide = wrap(items)
        narrow = wrap(items).filter(lambda v: v > 5)
        narrow.modifier().swap(0, 2)
        assert wide.to_list() == [5, 8, 7, 6]

    def test_swap_works_on_numpy_backing(self):
        arr = np.array([1.0, -1.0, 2.0, -2.0])
        DataModifier(arr, lambda v: v > 0).swap(0, 1)
        np.testing.assert_array_equal(arr, [2.0, -1.0, 1.0, -2.0])
