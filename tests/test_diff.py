"""Tests for field-level change detection and summaries."""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from marketing_budget.audit.diff import (
    EMPTY_PLACEHOLDER,
    MAX_DISPLAY_LENGTH,
    TRUNCATION_MARKER,
    diff_changes,
    display_value,
    format_field_name,
    snapshot,
    summarise_changes,
)
from marketing_budget.models import Budget, BudgetLineItem, BudgetStatus, FieldChange, Vendor


class TestDiffChanges:
    """Tests for diff_changes."""

    def test_identical_records(self):
        """Test identical records produce no changes."""
        assert diff_changes({"name": "A"}, {"name": "A"}) == []

    def test_single_field_change(self):
        """Test changing one field yields exactly one change."""
        changes = diff_changes({"name": "A", "code": "X"}, {"name": "B", "code": "X"})
        assert changes == [FieldChange(field="name", from_="A", to="B")]

    def test_timestamps_ignored(self):
        """Test changes to updated/created timestamps alone are not reported."""
        before = {"name": "A", "updated_at": "2026-01-01", "createdAt": "2026-01-01"}
        after = {"name": "A", "updated_at": "2026-02-01", "createdAt": "2026-02-01"}
        assert diff_changes(before, after) == []

    def test_extra_ignore(self):
        """Test caller-supplied fields are skipped."""
        assert diff_changes({"a": 1, "b": 1}, {"a": 2, "b": 2}, extra_ignore=["a"]) == [
            FieldChange(field="b", from_="1", to="2"),
        ]

    def test_added_and_removed_keys(self):
        """Test keys present on one side only are compared against None."""
        changes = diff_changes({"old": "x"}, {"new": "y"})
        assert changes == [
            FieldChange(field="old", from_="x", to=EMPTY_PLACEHOLDER),
            FieldChange(field="new", from_=EMPTY_PLACEHOLDER, to="y"),
        ]

    def test_nested_values_compared_by_serialisation(self):
        """Test nested edits register on the parent field; key order does not matter."""
        assert diff_changes({"meta": {"a": 1, "b": 2}}, {"meta": {"b": 2, "a": 1}}) == []

        changes = diff_changes({"items": [{"p": 1}]}, {"items": [{"p": 2}]})
        assert changes == [FieldChange(field="items", from_="[1 items]", to="[1 items]")]

    def test_models_accepted(self):
        """Test models are snapshotted before comparison."""
        before = Budget(property_address="1 Main St")
        after = before.model_copy(update={
            "status": BudgetStatus.APPROVED,
            "updated_at": datetime(2030, 1, 1, tzinfo=timezone.utc),
        })
        assert diff_changes(before, after) == [
            FieldChange(field="status", from_="draft", to="approved"),
        ]

    def test_int_and_bool_differ(self):
        """Test 1 and True are reported as different values."""
        assert len(diff_changes({"flag": 1}, {"flag": True})) == 1

    def test_decimal_scale_is_not_a_change(self):
        """Test prices differing only in trailing zeros compare equal."""
        before = Budget(line_items=[BudgetLineItem(service_id=1, schedule_price=Decimal("100"))])
        after = before.model_copy(update={
            "line_items": [BudgetLineItem(service_id=1, schedule_price=Decimal("100.00"))],
        })
        assert diff_changes(before, after) == []
        assert diff_changes({"price": Decimal("1E+2")}, {"price": Decimal("100.0")}) == []

    def test_decimal_value_change_detected(self):
        """Test a real price change is still reported."""
        changes = diff_changes({"price": Decimal("100")}, {"price": Decimal("100.50")})
        assert changes == [FieldChange(field="price", from_="100", to="100.50")]


class TestDisplayValue:
    """Tests for display_value."""

    @pytest.mark.parametrize("value,expected", [
        (None, "—"),
        ("", '""'),
        ("Acme", "Acme"),
        (True, "true"),
        (False, "false"),
        (3, "3"),
        (Decimal("450.50"), "450.50"),
        ([1, 2, 3], "[3 items]"),
        ((), "[0 items]"),
        ({"a": 1}, '{"a": 1}'),
        (BudgetStatus.SENT, "sent"),
    ])
    def test_display(self, value, expected):
        """Test each kind of value is displayed as expected."""
        assert display_value(value) == expected

    def test_long_text_truncated(self):
        """Test long strings are cut to MAX_DISPLAY_LENGTH with a marker."""
        shown = display_value("x" * 600)
        assert len(shown) == MAX_DISPLAY_LENGTH
        assert shown.endswith(TRUNCATION_MARKER)
        assert display_value("x" * MAX_DISPLAY_LENGTH) == "x" * MAX_DISPLAY_LENGTH

    def test_long_mapping_truncated(self):
        """Test serialised mappings are cut the same way."""
        assert display_value({"text": "y" * 200}).endswith(TRUNCATION_MARKER)


class TestSummaries:
    """Tests for format_field_name and summarise_changes."""

    @pytest.mark.parametrize("field,expected", [
        ("propertyAddress", "property address"),
        ("property_address", "property address"),
        ("vendor_id", "vendor"),
        ("scheduleId", "schedule"),
        ("id", "id"),
        ("name", "name"),
    ])
    def test_format_field_name(self, field, expected):
        """Test field names are turned into lower-case words."""
        assert format_field_name(field) == expected

    def test_no_changes(self):
        """Test the summary for an empty change list."""
        assert summarise_changes('Updated vendor "Acme"', []) == (
            'Updated vendor "Acme" (no field changes detected)'
        )

    def test_single_change(self):
        """Test a one-clause summary."""
        changes = [FieldChange(field="name", from_="Acme", to="Acme Corp")]
        assert summarise_changes('Updated vendor "Acme Corp"', changes) == (
            'Updated vendor "Acme Corp": name Acme → Acme Corp'
        )

    def test_truncation(self):
        """Test 5 changes with max_fields=3 give 3 clauses and '+2 more'."""
        changes = [FieldChange(field=f"field{i}", from_="a", to="b") for i in range(5)]
        summary = summarise_changes("Updated", changes, max_fields=3)

        assert summary.endswith("+2 more")
        assert summary.count("→") == 3
        assert summary == "Updated: field0 a → b, field1 a → b, field2 a → b, +2 more"

    def test_exact_fit_not_truncated(self):
        """Test no '+K more' when the changes fit."""
        changes = [FieldChange(field=f"f{i}", from_="a", to="b") for i in range(4)]
        assert "more" not in summarise_changes("Updated", changes, max_fields=4)


class TestSnapshot:
    """Tests for snapshot."""

    def test_snapshot_is_json_ready(self):
        """Test snapshots hold plain JSON values."""
        data = snapshot(Vendor(id=1, name="Acme"))
        assert data == {
            "id": 1,
            "name": "Acme",
            "short_code": None,
            "contact_email": None,
            "contact_phone": None,
            "is_active": True,
        }

    def test_budget_snapshot_serialises_money_and_dates(self):
        """Test enums, dates and decimals are serialised."""
        data = snapshot(Budget(property_address="1 Main St"))
        assert data["status"] == "draft"
        assert isinstance(data["created_at"], str)
