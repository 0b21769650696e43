from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional

from scheduhub.models.subscription import SubscriptionTier


class AuthProvider(str, Enum):
    """How the account signed up"""
    PASSWORD = "password"
    GOOGLE = "google"


class IdentityProfile(BaseModel):
    """What the identity provider tells us about a freshly confirmed user"""
    account_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    username: Optional[str] = None
    photo_url: Optional[str] = None
    provider: AuthProvider = AuthProvider.PASSWORD

    @property
    def derived_username(self) -> str:
        """Explicit username, else the email local part, else ``user``."""
        if self.username:
            return self.username.lower()
        if self.email:
            return self.email.split("@")[0].lower()
        return "user"


class Account(BaseModel):
    """User account record as stored in the accounts table"""
    account_id: str = Field(description="Stable identifier issued by the identity provider")
    subscription_tier: SubscriptionTier = Field(default=SubscriptionTier.BASIC)
    name: str = Field(default="User")
    username: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    photo_url: Optional[str] = Field(default=None)
    provider: AuthProvider = Field(default=AuthProvider.PASSWORD)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("subscription_tier", mode="before")
    @classmethod
    def default_unknown_tier(cls, v: Any) -> Any:
        """A missing or unrecognised stored tier reads as the basic tier"""
        if isinstance(v, SubscriptionTier):
            return v
        if isinstance(v, str) and v in {tier.value for tier in SubscriptionTier}:
            return v
        return SubscriptionTier.BASIC
