"""Validation package: approval workflow rules and role permissions."""

from marketing_budget.validation.permissions import (
    UserRole,
    can_create_budget,
    can_delete_budget,
    can_duplicate_budget,
    can_edit_budget,
    can_manage_reference_data,
    can_transition_budget,
)
from marketing_budget.validation.workflow import (
    IllegalTransitionError,
    PermissionDeniedError,
    WORKFLOW_TRANSITIONS,
    WorkflowError,
    allowed_transitions,
    is_transition_allowed,
    requires_validation,
    validate_for_approval,
    validate_transition,
)

__all__ = [
    # Permissions
    "UserRole",
    "can_create_budget",
    "can_delete_budget",
    "can_duplicate_budget",
    "can_edit_budget",
    "can_manage_reference_data",
    "can_transition_budget",
    # Workflow
    "IllegalTransitionError",
    "PermissionDeniedError",
    "WORKFLOW_TRANSITIONS",
    "WorkflowError",
    "allowed_transitions",
    "is_transition_allowed",
    "requires_validation",
    "validate_for_approval",
    "validate_transition",
]
