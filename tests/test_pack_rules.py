"""Tests for order quantity and pack size validation."""

import pytest

from processes.optimizer.types import ErrorCodes, InvalidItemsOrdered, InvalidPackSizes
from validators import MAX_INT32, normalize_pack_sizes, validate_items_ordered


class TestNormalizePackSizes:
    """Deduplication and ordering."""

    def test_sorts_descending(self):
        assert normalize_pack_sizes([250, 5000, 500, 2000, 1000]) == [5000, 2000, 1000, 500, 250]

    def test_removes_duplicates(self):
        assert normalize_pack_sizes([10, 40, 20, 10, 40]) == [40, 20, 10]

    def test_is_idempotent(self):
        once = normalize_pack_sizes([3, 7, 3, 1, 9])
        assert normalize_pack_sizes(once) == once

    def test_input_order_does_not_matter(self):
        assert normalize_pack_sizes([1, 2, 3]) == normalize_pack_sizes([3, 1, 2, 2])

    def test_does_not_mutate_input(self):
        sizes = [1, 3, 2, 3]
        normalize_pack_sizes(sizes)
        assert sizes == [1, 3, 2, 3]

    def test_accepts_any_iterable(self):
        assert normalize_pack_sizes(s for s in (6, 10)) == [10, 6]

    def test_accepts_int32_max(self):
        assert normalize_pack_sizes([MAX_INT32, 1]) == [MAX_INT32, 1]


class TestInvalidPackSizes:
    """Rejected pack size sets."""

    def test_empty_fails(self):
        with pytest.raises(InvalidPackSizes) as exc:
            normalize_pack_sizes([])
        assert exc.value.code is ErrorCodes.INVALID_PACK_SIZES

    @pytest.mark.parametrize("bad", [0, -5])
    def test_non_positive_fails_and_names_value(self, bad):
        with pytest.raises(InvalidPackSizes) as exc:
            normalize_pack_sizes([250, bad])
        assert str(bad) in str(exc.value)
        assert exc.value.details == {"value": bad}

    def test_above_int32_fails(self):
        with pytest.raises(InvalidPackSizes) as exc:
            normalize_pack_sizes([MAX_INT32 + 1, 250])
        assert "exceeds int32 max value" in str(exc.value)

    @pytest.mark.parametrize("bad", [2.5, "250", True, None])
    def test_non_integer_fails(self, bad):
        with pytest.raises(InvalidPackSizes):
            normalize_pack_sizes([bad])

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            normalize_pack_sizes([])


class TestValidateItemsOrdered:
    """Order quantity bounds."""

    def test_valid_quantity_passes(self):
        assert validate_items_ordered(1) == 1
        assert validate_items_ordered(MAX_INT32) == MAX_INT32

    @pytest.mark.parametrize("bad", [0, -1, MAX_INT32 + 1])
    def test_out_of_range_fails(self, bad):
        with pytest.raises(InvalidItemsOrdered) as exc:
            validate_items_ordered(bad)
        assert exc.value.code is ErrorCodes.INVALID_ITEMS_ORDERED
        assert exc.value.details == {"value": bad}

    @pytest.mark.parametrize("bad", [1.5, "10", False])
    def test_non_integer_fails(self, bad):
        with pytest.raises(InvalidItemsOrdered):
            validate_items_ordered(bad)
