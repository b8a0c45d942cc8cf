"""Unit tests for the Product aggregate."""

import pytest

from invtrack.domain.exceptions import ValidationError
from invtrack.domain.model.product import Product
from invtrack.domain.model.value_objects import Money, Quantity


def _product(**overrides) -> Product:
    fields = dict(id="p1", code="PR0001", name="Ryzen 9", price=Money.of("450"),
                  category="Processor")
    fields.update(overrides)
    return Product(**fields)


class TestProduct:

    def test_defaults(self):
        p = _product()
        assert p.unit == "piece"
        assert p.quantity == Quantity(0)
        assert p.created_at.tzinfo is not None

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="name is required"):
            _product(name="   ")

    def test_with_changes_returns_copy(self):
        p = _product()
        changed = p.with_changes(price=Money.of("400"), quantity=Quantity(3))
        assert changed.price == Money.of("400")
        assert changed.quantity == Quantity(3)
        assert p.price == Money.of("450")
        assert changed.created_at == p.created_at

    def test_with_changes_rejects_immutable_fields(self):
        with pytest.raises(ValidationError, match="immutable"):
            _product().with_changes(code="PR9999")

    def test_diff_lists_changed_fields(self):
        p = _product()
        other = p.with_changes(name="Ryzen 7", price=Money.of("450.00"))
        assert p.diff(other) == {"name": "Ryzen 7"}
