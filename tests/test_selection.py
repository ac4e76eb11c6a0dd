"""
Tests for selection helpers.
"""

import pytest

from servo_features import FEATURE_ALL, DimensionMismatchError, feature_line, is_selected, selected_indices


class TestSelectedIndices:

    @pytest.mark.parametrize("dim", [1, 4, 20, 40])
    def test_all_selects_every_component(self, dim):
        assert selected_indices(FEATURE_ALL, dim) == list(range(dim))

    def test_bitmask(self):
        select = feature_line(3) | feature_line(0)
        assert selected_indices(select, 5) == [0, 3]

    def test_bits_past_dimension_ignored(self):
        assert selected_indices(feature_line(1) | feature_line(8), 3) == [1]

    def test_iterable_is_sorted_and_unique(self):
        assert selected_indices([4, 1, 1, 2], 5) == [1, 2, 4]

    def test_iterable_out_of_range(self):
        with pytest.raises(DimensionMismatchError):
            selected_indices([0, 5], 5)
        with pytest.raises(DimensionMismatchError):
            selected_indices([-1], 5)

    def test_boolean_entries_rejected(self):
        with pytest.raises(TypeError):
            selected_indices([True, False, True], 3)
        with pytest.raises(TypeError):
            is_selected([True, False], 0)

    def test_non_integer_entries_rejected(self):
        with pytest.raises(TypeError):
            selected_indices([0, 1.5], 3)

    def test_empty(self):
        assert selected_indices(0, 3) == []
        assert selected_indices([], 3) == []


class TestIsSelected:

    def test_bitmask(self):
        select = feature_line(2)
        assert is_selected(select, 2)
        assert not is_selected(select, 1)

    def test_all(self):
        assert all(is_selected(FEATURE_ALL, i) for i in range(64))

    def test_iterable(self):
        assert is_selected({0, 2}, 2)
        assert not is_selected((0, 2), 1)

    def test_negative_line(self):
        with pytest.raises(ValueError):
            feature_line(-1)
