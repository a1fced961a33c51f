"""
Budget Approval Workflow

Two separate concerns live here:

REACHABILITY - which status moves exist at all:
    draft -> approved
    approved -> sent
    approved -> draft   (revert)
    sent -> archived
    archived is terminal

GATING - which of those moves need the budget to be complete.
Only draft -> approved is gated. Every other legal move is allowed
no matter how incomplete the budget is.

A move that is not in the graph raises IllegalTransitionError.
A move that is in the graph but fails its gate returns a
ValidationResult with the failed rules. Callers can therefore tell
"never allowed" apart from "allowed once the fields are fixed".

Pure functions - no side effects, safe to unit test without mocking.
"""

from typing import Callable, Optional

from marketing_budget.models.budget import (
    Budget,
    BudgetStatus,
    ValidationIssue,
    ValidationResult,
)
from marketing_budget.pricing.engine import line_item_price


WORKFLOW_TRANSITIONS: dict[BudgetStatus, frozenset[BudgetStatus]] = {
    BudgetStatus.DRAFT: frozenset({BudgetStatus.APPROVED}),
    BudgetStatus.APPROVED: frozenset({BudgetStatus.SENT, BudgetStatus.DRAFT}),
    BudgetStatus.SENT: frozenset({BudgetStatus.ARCHIVED}),
    BudgetStatus.ARCHIVED: frozenset(),
}

VALIDATED_TRANSITIONS: frozenset[tuple[BudgetStatus, BudgetStatus]] = frozenset({
    (BudgetStatus.DRAFT, BudgetStatus.APPROVED),
})


class WorkflowError(Exception):
    """Base exception for workflow usage errors."""
    pass


class IllegalTransitionError(WorkflowError):
    """The requested status move does not exist in the workflow graph."""

    def __init__(self, from_status: BudgetStatus, to_status: BudgetStatus):
        self.from_status = BudgetStatus(from_status)
        self.to_status = BudgetStatus(to_status)
        super().__init__(
            f"Cannot move a budget from '{self.from_status.value}' "
            f"to '{self.to_status.value}'"
        )


class PermissionDeniedError(WorkflowError):
    """The acting role may not perform this action."""

    def __init__(self, role: str, action: str):
        self.role = role
        self.action = action
        super().__init__(f"Role '{role}' is not allowed to {action}")


# =============================================================================
# Individual rule checkers
# =============================================================================

def validate_address(budget: Budget) -> Optional[ValidationIssue]:
    """Property address must be non-empty."""
    if not budget.property_address or not budget.property_address.strip():
        return ValidationIssue(
            rule="address_required",
            message="Property address is required.",
        )
    return None


def validate_has_line_items(budget: Budget) -> Optional[ValidationIssue]:
    """Budget must have at least one line item."""
    if not budget.line_items:
        return ValidationIssue(
            rule="line_items_required",
            message="Budget must have at least one line item.",
        )
    return None


def validate_selected_items(budget: Budget) -> Optional[ValidationIssue]:
    """At least one line item must be selected."""
    if not any(item.is_selected for item in budget.line_items):
        return ValidationIssue(
            rule="selected_items_required",
            message="At least one line item must be selected.",
        )
    return None


def validate_item_prices(budget: Budget) -> Optional[ValidationIssue]:
    """Every selected line item must have a positive price."""
    unpriced = [
        item for item in budget.line_items
        if item.is_selected and line_item_price(item) <= 0
    ]
    if not unpriced:
        return None

    count = len(unpriced)
    plural = count > 1
    return ValidationIssue(
        rule="item_prices_required",
        message=(
            f"{count} selected line item{'s have' if plural else ' has'} no price. "
            f"Set a price or deselect {'them' if plural else 'it'}."
        ),
    )


def validate_schedule(budget: Budget) -> Optional[ValidationIssue]:
    """A schedule must be linked to the budget."""
    if budget.schedule_id is None:
        return ValidationIssue(
            rule="schedule_required",
            message="A schedule template must be selected.",
        )
    return None


APPROVAL_RULES: tuple[Callable[[Budget], Optional[ValidationIssue]], ...] = (
    validate_address,
    validate_has_line_items,
    validate_selected_items,
    validate_item_prices,
    validate_schedule,
)


# =============================================================================
# Composite validators
# =============================================================================

def validate_for_approval(budget: Budget) -> ValidationResult:
    """
    Run every approval rule and collect all failures.

    Does not stop at the first failure: the user sees everything
    that needs fixing in one pass.
    """
    issues = []
    for check in APPROVAL_RULES:
        issue = check(budget)
        if issue is not None:
            issues.append(issue)

    return ValidationResult(is_valid=not issues, issues=issues)


def allowed_transitions(status: BudgetStatus) -> frozenset[BudgetStatus]:
    """Statuses a budget can move to from this one."""
    return WORKFLOW_TRANSITIONS[BudgetStatus(status)]


def is_transition_allowed(from_status: BudgetStatus, to_status: BudgetStatus) -> bool:
    return BudgetStatus(to_status) in allowed_transitions(from_status)


def requires_validation(from_status: BudgetStatus, to_status: BudgetStatus) -> bool:
    """True if this move is gated by the approval rules."""
    return (BudgetStatus(from_status), BudgetStatus(to_status)) in VALIDATED_TRANSITIONS


def validate_transition(
    budget: Budget,
    from_status: BudgetStatus,
    to_status: BudgetStatus,
) -> ValidationResult:
    """
    Validate a budget for a specific status move.

    Raises:
        IllegalTransitionError: If the move is not in the workflow graph

    Returns:
        The approval rule result for gated moves, a passing result otherwise.
    """
    if not is_transition_allowed(from_status, to_status):
        raise IllegalTransitionError(from_status, to_status)

    if requires_validation(from_status, to_status):
        return validate_for_approval(budget)

    return ValidationResult(is_valid=True, issues=[])
