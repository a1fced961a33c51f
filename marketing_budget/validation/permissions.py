"""
Role-Based Access Control

Three roles:
  - viewer: read-only access to all budget data
  - editor: create and edit drafts, delete or duplicate any budget
  - admin:  edit any status, perform transitions, manage reference data

Resolving a user's role (from portal group membership) happens outside
the engine; these predicates only answer "may this role do that".
"""

from enum import Enum

from marketing_budget.models.budget import BudgetStatus


class UserRole(str, Enum):
    """User role within the Marketing Budget application."""
    VIEWER = "viewer"
    EDITOR = "editor"
    ADMIN = "admin"


_WRITERS = frozenset({UserRole.EDITOR, UserRole.ADMIN})


def can_create_budget(role: UserRole) -> bool:
    return role in _WRITERS


def can_edit_budget(role: UserRole, status: BudgetStatus) -> bool:
    """Admins edit anything; editors only while the budget is a draft."""
    if role == UserRole.ADMIN:
        return True
    if role == UserRole.EDITOR:
        return status == BudgetStatus.DRAFT
    return False


def can_delete_budget(role: UserRole) -> bool:
    return role in _WRITERS


def can_duplicate_budget(role: UserRole) -> bool:
    return role in _WRITERS


def can_transition_budget(role: UserRole) -> bool:
    return role == UserRole.ADMIN


def can_manage_reference_data(role: UserRole) -> bool:
    """Services, vendors, suburbs and schedules."""
    return role == UserRole.ADMIN
