"""
Entitlement evaluator.

Pure decision functions over a subscription tier and workspace snapshots.
Nothing here reads the clock, touches storage, or keeps state between calls,
and nothing raises for missing input: absent data counts as zero and an
unknown tier is evaluated as the basic tier.
"""

from typing import Any, Iterable, Optional

from scheduhub.models.subscription import (
    Allowed,
    Decision,
    DenialReason,
    Denied,
    Limit,
    SubscriptionTier,
    TierInfo,
    UsageSummary,
    WorkspaceUsage,
)
from scheduhub.models.workspace import Workspace
from scheduhub.services.entitlement_table import limits_for
from scheduhub.utils.workspace_helpers import is_owner_in_employees


def count_owned_workspaces(workspaces: Optional[Iterable[Workspace]], account_id: Optional[str]) -> int:
    """
    Count the workspaces owned by an account.

    Args:
        workspaces: Workspace snapshots, may be None
        account_id: Account identifier, may be None

    Returns:
        int: Number of workspaces whose owner is ``account_id``
    """
    if not workspaces or not account_id:
        return 0
    return sum(1 for workspace in workspaces if workspace.owner_id == account_id)


def count_workspace_members(workspace: Optional[Workspace]) -> int:
    """
    Count the members of a workspace, owner included.

    The owner counts once: listed employees as-is when the owner is among
    them, one more otherwise.
    """
    if workspace is None:
        return 0

    employee_count = len(workspace.employees)
    return employee_count if is_owner_in_employees(workspace) else employee_count + 1


def _check(limit: Limit, current_count: Optional[int], reason: DenialReason) -> Decision:
    current_count = current_count or 0
    if limit.is_reached_by(current_count):
        return Denied(reason=reason, limit=limit.bound)
    return Allowed()


def can_create_workspace(tier: Any, current_owned_count: Optional[int]) -> Decision:
    """Deny once the owned workspace count reaches the tier's maximum."""
    return _check(
        limits_for(tier).max_workspaces,
        current_owned_count,
        DenialReason.WORKSPACE_LIMIT_REACHED,
    )


def can_add_employee(tier: Any, current_employee_count: Optional[int]) -> Decision:
    """Deny once the employee count reaches the tier's per-workspace maximum."""
    return _check(
        limits_for(tier).max_employees_per_workspace,
        current_employee_count,
        DenialReason.EMPLOYEE_LIMIT_REACHED,
    )


def can_workspace_add_employee(tier: Any, workspace: Optional[Workspace]) -> Decision:
    """
    Check whether a workspace can take one more employee.

    Both outcomes report the current member count and the limit, so callers
    can render usage without a second call.
    """
    current_count = count_workspace_members(workspace)
    limit = limits_for(tier).max_employees_per_workspace

    if limit.is_reached_by(current_count):
        return Denied(
            reason=DenialReason.EMPLOYEE_LIMIT_REACHED,
            limit=limit.bound,
            current_count=current_count,
        )
    return Allowed(current_count=current_count, limit=limit)


def describe_tier(tier: Any) -> TierInfo:
    limits = limits_for(tier)
    return TierInfo(
        tier=limits.tier,
        name=limits.name,
        name_key=limits.name_key,
        max_workspaces=limits.max_workspaces.display(),
        max_employees=limits.max_employees_per_workspace.display(),
        is_unlimited=limits.tier == SubscriptionTier.UNLIMITED,
    )


def summarize_usage(tier: Any, workspaces: Optional[Iterable[Workspace]], account_id: Optional[str]) -> UsageSummary:
    """
    Build the usage summary shown on the subscription screen.

    Args:
        tier: Account's subscription tier
        workspaces: Workspace snapshots visible to the account
        account_id: Account identifier

    Returns:
        UsageSummary: Owned workspace usage and member usage per owned workspace
    """
    workspaces = list(workspaces or [])
    limits = limits_for(tier)
    owned = [workspace for workspace in workspaces if account_id and workspace.owner_id == account_id]
    owned_count = count_owned_workspaces(workspaces, account_id)

    return UsageSummary(
        tier=describe_tier(tier),
        owned_workspaces=owned_count,
        workspace_limit=limits.max_workspaces,
        can_create_workspace=can_create_workspace(tier, owned_count).allowed,
        workspaces=[
            WorkspaceUsage(
                workspace_id=workspace.workspace_id,
                name=workspace.name,
                member_count=count_workspace_members(workspace),
                member_limit=limits.max_employees_per_workspace,
                can_add_employee=can_workspace_add_employee(tier, workspace).allowed,
            )
            for workspace in owned
        ],
    )
