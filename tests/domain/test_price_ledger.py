"""Unit tests for the price ledger policies and queries."""

from datetime import date
from itertools import count

import pytest

from invtrack.domain.exceptions import ValidationError
from invtrack.domain.model.price_history import PriceHistoryEntry
from invtrack.domain.model.value_objects import Money
from invtrack.domain.service.price_ledger import (
    AppendOnlyPolicy,
    UpsertOnDatePolicy,
    history,
    latest_price,
    ledger_policy,
)

MON = date(2024, 3, 4)
TUE = date(2024, 3, 5)
WED = date(2024, 3, 6)


def _ids():
    counter = count(1)
    return lambda: f"e{next(counter)}"


def _entry(id_, product_id, price, day):
    return PriceHistoryEntry(id=id_, product_id=product_id, price=Money.of(price), date=day)


class TestUpsertOnDatePolicy:

    def test_appends_when_no_entry_for_date(self):
        policy = UpsertOnDatePolicy(id_factory=_ids())
        entries, used = policy.record_price([], "p1", Money.of("100"), MON)
        assert entries == [used]
        assert used == _entry("e1", "p1", "100", MON)

    def test_replaces_same_day_entry_in_place(self):
        policy = UpsertOnDatePolicy(id_factory=_ids())
        original = [_entry("a", "p1", "100", MON), _entry("b", "p2", "5", MON)]
        entries, used = policy.record_price(original, "p1", Money.of("80"), MON)
        assert used.id == "a"
        assert entries == [_entry("a", "p1", "80", MON), _entry("b", "p2", "5", MON)]

    def test_input_not_mutated(self):
        policy = UpsertOnDatePolicy(id_factory=_ids())
        original = [_entry("a", "p1", "100", MON)]
        policy.record_price(original, "p1", Money.of("80"), MON)
        policy.record_price(original, "p1", Money.of("70"), TUE)
        assert original == [_entry("a", "p1", "100", MON)]

    def test_other_products_same_date_untouched(self):
        policy = UpsertOnDatePolicy(id_factory=_ids())
        original = [_entry("a", "p2", "100", MON)]
        entries, used = policy.record_price(original, "p1", Money.of("80"), MON)
        assert len(entries) == 2
        assert used.product_id == "p1"

    def test_same_day_sequence_leaves_one_entry_last_price(self):
        policy = UpsertOnDatePolicy(id_factory=_ids())
        entries: list = []
        for price in ("100", "90", "80"):
            entries, _ = policy.record_price(entries, "p1", Money.of(price), MON)
        assert len(history(entries, "p1")) == 1
        assert latest_price(entries, "p1") == Money.of("80")

    def test_distinct_days_grow_history_by_one_each(self):
        policy = UpsertOnDatePolicy(id_factory=_ids())
        entries: list = []
        for n, day in enumerate((MON, TUE, WED), start=1):
            entries, _ = policy.record_price(entries, "p1", Money.of(n * 10), day)
            assert len(history(entries, "p1")) == n


class TestAppendOnlyPolicy:

    def test_always_appends(self):
        policy = AppendOnlyPolicy(id_factory=_ids())
        entries, _ = policy.record_price([], "p1", Money.of("100"), MON)
        entries, used = policy.record_price(entries, "p1", Money.of("90"), MON)
        assert len(entries) == 2
        assert used.id == "e2"

    def test_latest_of_same_day_is_last_recorded(self):
        policy = AppendOnlyPolicy(id_factory=_ids())
        entries: list = []
        for price in ("100", "90", "95"):
            entries, _ = policy.record_price(entries, "p1", Money.of(price), MON)
        assert latest_price(entries, "p1") == Money.of("95")


class TestQueries:

    def test_history_sorted_ascending_and_filtered(self):
        entries = [
            _entry("c", "p1", "30", WED),
            _entry("x", "p2", "99", TUE),
            _entry("a", "p1", "10", MON),
            _entry("b", "p1", "20", TUE),
        ]
        assert [e.id for e in history(entries, "p1")] == ["a", "b", "c"]

    def test_history_is_restartable(self):
        entries = [_entry("b", "p1", "20", TUE), _entry("a", "p1", "10", MON)]
        assert history(entries, "p1") == history(entries, "p1")

    def test_latest_price_uses_max_date_not_position(self):
        entries = [_entry("b", "p1", "20", TUE), _entry("a", "p1", "10", MON)]
        assert latest_price(entries, "p1") == Money.of("20")

    def test_latest_price_none_when_no_entries(self):
        assert latest_price([_entry("a", "p2", "10", MON)], "p1") is None


class TestPolicyLookup:

    def test_known_names(self):
        assert isinstance(ledger_policy("upsert"), UpsertOnDatePolicy)
        assert isinstance(ledger_policy("APPEND"), AppendOnlyPolicy)

    def test_unknown_name_rejected(self):
        with pytest.raises(ValidationError, match="Unknown ledger policy"):
            ledger_policy("overwrite")
