"""Tests for the approval workflow and role permissions."""

import pytest
from decimal import Decimal

from marketing_budget.models import Budget, BudgetLineItem, BudgetStatus
from marketing_budget.validation import (
    IllegalTransitionError,
    UserRole,
    WORKFLOW_TRANSITIONS,
    WorkflowError,
    allowed_transitions,
    can_create_budget,
    can_delete_budget,
    can_duplicate_budget,
    can_edit_budget,
    can_manage_reference_data,
    can_transition_budget,
    is_transition_allowed,
    requires_validation,
    validate_for_approval,
    validate_transition,
)


class TestApprovalRules:
    """Tests for validate_for_approval."""

    def test_complete_budget_passes(self, complete_budget):
        """Test a complete budget passes every rule."""
        result = validate_for_approval(complete_budget)
        assert result.is_valid is True
        assert result.issues == []

    def test_empty_budget_collects_every_failure(self):
        """Test all failures are reported in one pass."""
        result = validate_for_approval(Budget())
        assert result.is_valid is False
        assert result.rules == [
            "address_required",
            "line_items_required",
            "selected_items_required",
            "schedule_required",
        ]

    def test_whitespace_address_rejected(self, complete_budget):
        """Test an address of only whitespace is treated as missing."""
        budget = complete_budget.model_copy(update={"property_address": "   "})
        assert validate_for_approval(budget).rules == ["address_required"]

    def test_nothing_selected(self, complete_budget):
        """Test a budget with every item deselected fails."""
        items = [item.model_copy(update={"is_selected": False}) for item in complete_budget.line_items]
        budget = complete_budget.model_copy(update={"line_items": items})
        assert validate_for_approval(budget).rules == ["selected_items_required"]

    def test_single_unpriced_item_message(self, complete_budget):
        """Test the message for one unpriced item is singular."""
        items = [*complete_budget.line_items, BudgetLineItem(service_id=9)]
        result = validate_for_approval(complete_budget.model_copy(update={"line_items": items}))

        assert result.rules == ["item_prices_required"]
        assert result.issues[0].message == (
            "1 selected line item has no price. Set a price or deselect it."
        )

    def test_several_unpriced_items_message(self, complete_budget):
        """Test the message for several unpriced items is plural."""
        items = [
            *complete_budget.line_items,
            BudgetLineItem(service_id=9),
            BudgetLineItem(service_id=10, schedule_price=Decimal("0")),
        ]
        result = validate_for_approval(complete_budget.model_copy(update={"line_items": items}))
        assert result.issues[0].message == (
            "2 selected line items have no price. Set a price or deselect them."
        )

    def test_unselected_unpriced_item_ignored(self, complete_budget):
        """Test unpriced items that are not selected do not block approval."""
        items = [*complete_budget.line_items, BudgetLineItem(service_id=9, is_selected=False)]
        assert validate_for_approval(complete_budget.model_copy(update={"line_items": items})).is_valid

    def test_override_counts_as_price(self, complete_budget):
        """Test an overridden price satisfies the price rule."""
        items = [BudgetLineItem(
            service_id=9,
            schedule_price=Decimal("0"),
            override_price=Decimal("75"),
            is_overridden=True,
        )]
        assert validate_for_approval(complete_budget.model_copy(update={"line_items": items})).is_valid

    def test_missing_address_items_and_schedule(self):
        """Test at least three distinct violations are reported together."""
        result = validate_for_approval(Budget(property_address=""))
        assert len(set(result.rules)) >= 3
        assert {"address_required", "line_items_required", "schedule_required"} <= set(result.rules)


class TestTransitions:
    """Tests for the status graph and validate_transition."""

    def test_graph(self):
        """Test the adjacency map."""
        assert allowed_transitions(BudgetStatus.DRAFT) == {BudgetStatus.APPROVED}
        assert allowed_transitions(BudgetStatus.APPROVED) == {BudgetStatus.SENT, BudgetStatus.DRAFT}
        assert allowed_transitions(BudgetStatus.SENT) == {BudgetStatus.ARCHIVED}
        assert allowed_transitions(BudgetStatus.ARCHIVED) == frozenset()
        assert set(WORKFLOW_TRANSITIONS) == set(BudgetStatus)

    def test_is_transition_allowed_accepts_strings(self):
        """Test plain status strings are accepted."""
        assert is_transition_allowed("approved", "draft") is True
        assert is_transition_allowed("draft", "sent") is False

    def test_only_draft_to_approved_is_gated(self):
        """Test the gating policy."""
        gated = [
            (src, dst)
            for src in BudgetStatus
            for dst in allowed_transitions(src)
            if requires_validation(src, dst)
        ]
        assert gated == [(BudgetStatus.DRAFT, BudgetStatus.APPROVED)]

    def test_approved_to_sent_ignores_field_checks(self):
        """Test approved -> sent passes even for an empty budget."""
        result = validate_transition(Budget(), BudgetStatus.APPROVED, BudgetStatus.SENT)
        assert result.is_valid is True

    def test_draft_to_archived_is_illegal(self, complete_budget):
        """Test draft -> archived is illegal however complete the budget."""
        with pytest.raises(IllegalTransitionError) as exc_info:
            validate_transition(complete_budget, BudgetStatus.DRAFT, BudgetStatus.ARCHIVED)

        assert exc_info.value.from_status == BudgetStatus.DRAFT
        assert exc_info.value.to_status == BudgetStatus.ARCHIVED
        assert isinstance(exc_info.value, WorkflowError)

    def test_same_status_is_illegal(self, complete_budget):
        """Test a move to the current status is not a transition."""
        with pytest.raises(IllegalTransitionError):
            validate_transition(complete_budget, BudgetStatus.DRAFT, BudgetStatus.DRAFT)

    def test_archived_is_terminal(self, complete_budget):
        """Test nothing leaves archived."""
        for status in BudgetStatus:
            with pytest.raises(IllegalTransitionError):
                validate_transition(complete_budget, BudgetStatus.ARCHIVED, status)

    def test_draft_to_approved_runs_rules(self):
        """Test draft -> approved returns the rule failures as data."""
        result = validate_transition(Budget(), BudgetStatus.DRAFT, BudgetStatus.APPROVED)
        assert result.is_valid is False
        assert "address_required" in result.rules

    def test_revert_to_draft(self):
        """Test approved -> draft is allowed without checks."""
        assert validate_transition(Budget(), BudgetStatus.APPROVED, BudgetStatus.DRAFT).is_valid


class TestPermissions:
    """Tests for role predicates."""

    @pytest.mark.parametrize("role,expected", [
        (UserRole.VIEWER, False),
        (UserRole.EDITOR, True),
        (UserRole.ADMIN, True),
    ])
    def test_create_delete_duplicate(self, role, expected):
        """Test editors and admins manage budgets."""
        assert can_create_budget(role) is expected
        assert can_delete_budget(role) is expected
        assert can_duplicate_budget(role) is expected

    def test_editor_edits_drafts_only(self):
        """Test editors can only edit drafts."""
        assert can_edit_budget(UserRole.EDITOR, BudgetStatus.DRAFT) is True
        assert can_edit_budget(UserRole.EDITOR, BudgetStatus.APPROVED) is False

    def test_admin_edits_anything(self):
        """Test admins can edit at every status."""
        assert all(can_edit_budget(UserRole.ADMIN, status) for status in BudgetStatus)

    def test_viewer_is_read_only(self):
        """Test viewers cannot edit at any status."""
        assert not any(can_edit_budget(UserRole.VIEWER, status) for status in BudgetStatus)

    def test_admin_only_actions(self):
        """Test transitions and reference data are admin-only."""
        assert can_transition_budget(UserRole.ADMIN) is True
        assert can_transition_budget(UserRole.EDITOR) is False
        assert can_manage_reference_data(UserRole.ADMIN) is True
        assert can_manage_reference_data(UserRole.EDITOR) is False
