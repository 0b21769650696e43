from datetime import datetime, timezone
from pydantic import BaseModel, Field
from typing import List, Optional

WORKSPACE_NAME_MAX_LENGTH = 100


class Employee(BaseModel):
    """Membership record of a user inside a workspace"""
    user_id: str
    username: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None
    role_id: Optional[str] = None
    color: Optional[str] = None
    added_at: Optional[datetime | str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="When the employee joined, defaults to UTC now",
    )


class Workspace(BaseModel):
    """
    Workspace record as stored in the workspaces table.

    The owner takes part in the workspace whether or not an ``Employee``
    record exists for them, so ``employees`` may or may not list the owner.
    """
    workspace_id: str
    name: str = Field(default="", max_length=WORKSPACE_NAME_MAX_LENGTH)
    owner_id: str
    employees: List[Employee] = Field(default_factory=list)
    created_at: Optional[datetime | str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
    )

    @property
    def member_ids(self) -> List[str]:
        return [employee.user_id for employee in self.employees]
