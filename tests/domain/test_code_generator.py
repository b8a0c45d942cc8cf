"""Unit tests for product code generation."""

import pytest

from invtrack.domain.exceptions import ValidationError
from invtrack.domain.model.product import Product
from invtrack.domain.model.value_objects import Money
from invtrack.domain.service.code_generator import (
    CategoryCodePolicy,
    SequentialCodePolicy,
    code_policy,
)


def _products(*codes: str) -> list[Product]:
    return [
        Product(id=str(i), code=code, name=f"Item {i}", price=Money.of("1"))
        for i, code in enumerate(codes)
    ]


class TestCategoryCodePolicy:

    def test_empty_catalog_starts_at_one(self):
        assert CategoryCodePolicy().next_code([], "Storage") == "ST0001"

    def test_increments_within_prefix(self):
        existing = _products("ST0001", "ST0004", "PR0009")
        assert CategoryCodePolicy().next_code(existing, "Storage") == "ST0005"

    def test_other_prefixes_do_not_count(self):
        existing = _products("PR0009")
        assert CategoryCodePolicy().next_code(existing, "storage") == "ST0001"

    def test_prefix_is_uppercased_first_two_letters(self):
        assert CategoryCodePolicy().prefix_for("graphics card") == "GR"

    def test_short_or_blank_category_is_padded(self):
        policy = CategoryCodePolicy()
        assert policy.prefix_for("X") == "XX"
        assert policy.prefix_for("") == "XX"

    def test_non_ascii_letters_are_skipped(self):
        policy = CategoryCodePolicy()
        assert policy.prefix_for("Ürün") == "RN"
        assert policy.prefix_for("Éclairage") == "CL"
        assert policy.prefix_for("Ü") == "XX"

    def test_longer_prefix_codes_not_confused(self):
        # "STX0007" starts with "ST" but is not an ST#### code
        existing = _products("STX0007", "ST0002")
        assert CategoryCodePolicy().next_code(existing, "Storage") == "ST0003"


class TestSequentialCodePolicy:

    def test_empty_catalog_seed(self):
        assert SequentialCodePolicy().next_code([], "anything") == "PR0001"

    def test_global_maximum_across_prefixes(self):
        existing = _products("PR0002", "ST0010", "CP0003")
        assert SequentialCodePolicy().next_code(existing, "Storage") == "PR0011"

    def test_unparseable_codes_ignored(self):
        existing = _products("legacy-1", "PR0001")
        assert SequentialCodePolicy().next_code(existing, "") == "PR0002"


class TestUniqueness:

    @pytest.mark.parametrize("policy", [CategoryCodePolicy(), SequentialCodePolicy()])
    def test_returned_code_not_in_use(self, policy):
        existing = _products("PR0001", "PR0002", "PR0003")
        code = policy.next_code(existing, "Processor")
        assert code not in {p.code for p in existing}


class TestPolicyLookup:

    def test_known_names(self):
        assert isinstance(code_policy("category"), CategoryCodePolicy)
        assert isinstance(code_policy("Sequential"), SequentialCodePolicy)

    def test_unknown_name_rejected(self):
        with pytest.raises(ValidationError, match="Unknown code policy"):
            code_policy("random")
