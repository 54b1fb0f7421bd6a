# resolve360/services/lifecycle.py
"""
Issue status rules.

Statuses are Open (set at creation), Assigned and Resolved. Under the default
permissive policy any status may follow any other, including writing the
current status again. The monotonic policy only lets an issue move forward
along Open -> Assigned -> Resolved (re-writing the current status is allowed).

Only admins and the contractor the issue is assigned to may change status.
"""
from enum import Enum
from typing import Any, Dict, Mapping

from ..utils.errors import InvalidTransitionError, LifecyclePermissionError
from .roles import Role

class IssueStatus(str, Enum):
    OPEN = "Open"
    ASSIGNED = "Assigned"
    RESOLVED = "Resolved"

INITIAL_STATUS = IssueStatus.OPEN

_STATUS_ORDER = {
    IssueStatus.OPEN: 0,
    IssueStatus.ASSIGNED: 1,
    IssueStatus.RESOLVED: 2,
}

class TransitionPolicy(str, Enum):
    PERMISSIVE = "permissive"
    MONOTONIC = "monotonic"

class IssueLifecycle:
    def __init__(self, policy: TransitionPolicy = TransitionPolicy.PERMISSIVE):
        self.policy = TransitionPolicy(policy)

    def can_transition(self, actor: Mapping[str, Any], issue: Mapping[str, Any]) -> bool:
        role = actor.get("role")
        if role == Role.ADMIN.value:
            return True
        if role == Role.CONTRACTOR.value:
            assigned = (issue.get("assigned_contractor") or "").lower()
            return bool(assigned) and assigned == (actor.get("email") or "").lower()
        return False

    def is_allowed(self, current, new) -> bool:
        current, new = IssueStatus(current), IssueStatus(new)
        if self.policy == TransitionPolicy.PERMISSIVE:
            return True
        return _STATUS_ORDER[new] >= _STATUS_ORDER[current]

    def transition(self, actor: Mapping[str, Any], issue: Mapping[str, Any], new_status) -> Dict[str, Any]:
        """Check a status change and return the partial update to write."""
        if not self.can_transition(actor, issue):
            raise LifecyclePermissionError(
                f"{actor.get('email')} may not change the status of issue {issue.get('issue_id')}"
            )
        try:
            new_status = IssueStatus(new_status)
        except ValueError:
            raise InvalidTransitionError(f"Unknown status {new_status!r}")

        current = issue.get("status") or INITIAL_STATUS.value
        if not self.is_allowed(current, new_status):
            raise InvalidTransitionError(
                f"Cannot move issue from {current} to {new_status.value} under {self.policy.value} policy"
            )
        return {"status": new_status.value}
