"""
Helpers for reading workspace membership.

The owner belongs to every workspace they own, but the stored employee list
may or may not contain a record for them. These helpers account for both.
"""
from typing import List, Optional

from scheduhub.constants.subscription_tiers import OWNER_ROLE_ID
from scheduhub.models.account import Account
from scheduhub.models.workspace import Employee, Workspace


def is_owner_in_employees(workspace: Optional[Workspace]) -> bool:
    if workspace is None:
        return False
    return any(employee.user_id == workspace.owner_id for employee in workspace.employees)


def members_including_owner(workspace: Optional[Workspace], owner: Optional[Account]) -> List[Employee]:
    """
    Get every member of the workspace, owner first when not already listed.

    Args:
        workspace: Workspace snapshot
        owner: Owner account, used to build the implicit owner record

    Returns:
        List of employees, with the owner prepended under the owner role
    """
    if workspace is None:
        return []

    members = list(workspace.employees)
    if owner is not None and not is_owner_in_employees(workspace):
        members.insert(0, Employee(
            user_id=workspace.owner_id,
            username=owner.username,
            name=owner.name,
            email=owner.email,
            photo_url=owner.photo_url,
            role_id=OWNER_ROLE_ID,
            added_at=None,
        ))
    return members


def count_members_for_role(workspace: Optional[Workspace], role_id: str) -> int:
    """Count members holding ``role_id``; the owner role counts an unlisted owner."""
    if workspace is None:
        return 0

    count = sum(1 for employee in workspace.employees if employee.role_id == role_id)
    if role_id == OWNER_ROLE_ID and not is_owner_in_employees(workspace):
        count += 1
    return count
