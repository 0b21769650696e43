from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_serializer
from typing import Literal, Optional, Union

from scheduhub.constants.subscription_tiers import UNLIMITED_LABEL


class SubscriptionTier(str, Enum):
    """Subscription tier enumeration, declared from lowest to highest"""
    BASIC = "basic"
    EXTENDED = "extended"
    UNLIMITED = "unlimited"


class DenialReason(str, Enum):
    """Machine-readable reason codes, translated to text by the clients"""
    WORKSPACE_LIMIT_REACHED = "workspace_limit_reached"
    EMPLOYEE_LIMIT_REACHED = "employee_limit_reached"


class Limit(BaseModel):
    """
    A numeric ceiling that is either bounded or unbounded.

    ``bound`` is ``None`` for an unbounded limit. Comparisons go through
    ``is_reached_by`` so callers never compare against a sentinel number.
    """

    model_config = ConfigDict(frozen=True)

    bound: Optional[int] = Field(default=None, ge=0)

    @classmethod
    def bounded(cls, value: int) -> "Limit":
        return cls(bound=value)

    @classmethod
    def unbounded(cls) -> "Limit":
        return cls(bound=None)

    @property
    def is_unbounded(self) -> bool:
        return self.bound is None

    def is_reached_by(self, count: int) -> bool:
        """Inclusive ceiling: a count equal to the bound is at the limit."""
        if self.bound is None:
            return False
        return count >= self.bound

    def display(self) -> Union[int, str]:
        return UNLIMITED_LABEL if self.bound is None else self.bound

    @model_serializer
    def serialize_limit(self) -> Union[int, str]:
        return self.display()


class TierLimits(BaseModel):
    """Limits granted by a subscription tier"""

    model_config = ConfigDict(frozen=True)

    tier: SubscriptionTier
    name: str
    name_key: str
    max_workspaces: Limit
    max_employees_per_workspace: Limit


class Allowed(BaseModel):
    """Permitted action. The richer employee check also reports usage."""

    model_config = ConfigDict(frozen=True)

    allowed: Literal[True] = True
    current_count: Optional[int] = None
    limit: Optional[Limit] = None


class Denied(BaseModel):
    """Refused action. A denial always happens against a bounded limit."""

    model_config = ConfigDict(frozen=True)

    allowed: Literal[False] = False
    reason: DenialReason
    limit: int
    current_count: Optional[int] = None


Decision = Union[Allowed, Denied]


class TierInfo(BaseModel):
    """Display-ready description of a tier"""

    model_config = ConfigDict(frozen=True)

    tier: SubscriptionTier
    name: str
    name_key: str
    max_workspaces: Union[int, str]
    max_employees: Union[int, str]
    is_unlimited: bool


class WorkspaceUsage(BaseModel):
    workspace_id: str
    name: str
    member_count: int
    member_limit: Limit
    can_add_employee: bool


class UsageSummary(BaseModel):
    """Usage of an account against its tier, for the subscription screen"""
    tier: TierInfo
    owned_workspaces: int
    workspace_limit: Limit
    can_create_workspace: bool
    workspaces: list[WorkspaceUsage] = Field(default_factory=list)
