"""
Account Service for managing account records and their subscription tier.
"""

import os
from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from scheduhub.models.account import Account, IdentityProfile
from scheduhub.models.errors import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    DocumentStoreError,
    InvalidSubscriptionTierError,
)
from scheduhub.models.subscription import SubscriptionTier
from scheduhub.services.aws import get_dynamodb_resource
from scheduhub.services.entitlement_table import default_tier, is_valid_tier, tier_rank

logger = Logger()

USERNAME_INDEX_NAME = "UsernameIndex"


def get_accounts_table_name() -> str:
    return os.environ.get("ACCOUNTS_TABLE_NAME", "sh-accounts")


def _account_key(account_id: str) -> Dict[str, str]:
    return {"PK": f"USER#{account_id}", "SK": "PROFILE"}


class AccountService:
    """Service for reading and writing account records."""

    def __init__(self, table_name: Optional[str] = None):
        self.table_name = table_name or get_accounts_table_name()
        self._dynamodb = None
        self._table = None

    @property
    def dynamodb(self):
        """Lazy initialization of DynamoDB resource"""
        if self._dynamodb is None:
            self._dynamodb = get_dynamodb_resource()
        return self._dynamodb

    @property
    def table(self):
        """Lazy initialization of DynamoDB table"""
        if self._table is None:
            self._table = self.dynamodb.Table(self.table_name)
        return self._table

    def create_account(self, profile: IdentityProfile) -> Account:
        """
        Create the account record of a newly registered user.

        New accounts always start on the default tier.

        Args:
            profile: Identity returned by the identity provider

        Returns:
            Account: Created account

        Raises:
            AccountAlreadyExistsError: A record already exists for this account
        """
        account = Account(
            account_id=profile.account_id,
            subscription_tier=default_tier(),
            name=profile.display_name or "User",
            username=profile.derived_username,
            email=profile.email,
            photo_url=profile.photo_url,
            provider=profile.provider,
        )

        item: Dict[str, Any] = {
            **_account_key(account.account_id),
            **account.model_dump(mode="json", exclude_none=True),
        }

        try:
            self.table.put_item(
                Item=item,
                ConditionExpression="attribute_not_exists(PK)",  # Prevent overwrites
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise AccountAlreadyExistsError(account.account_id) from e
            raise DocumentStoreError(f"DynamoDB error: {e.response['Error']['Message']}") from e
        except BotoCoreError as e:
            raise DocumentStoreError(f"AWS connection error: {str(e)}") from e

        logger.info(f"Created account {account.account_id} on tier {account.subscription_tier.value}")
        return account

    def get_account(self, account_id: str) -> Optional[Account]:
        """
        Get an account by id.

        Returns:
            Account or None if not found
        """
        try:
            response = self.table.get_item(Key=_account_key(account_id))
        except ClientError as e:
            raise DocumentStoreError(f"DynamoDB error: {e.response['Error']['Message']}") from e
        except BotoCoreError as e:
            raise DocumentStoreError(f"AWS connection error: {str(e)}") from e

        item = response.get("Item")
        if not item:
            return None

        stored_tier = item.get("subscription_tier")
        if stored_tier is not None and not is_valid_tier(stored_tier):
            logger.warning(f"Account {account_id} has unknown tier {stored_tier!r}, reading it as {default_tier().value}")
        return Account(**item)

    def get_or_create_account(self, profile: IdentityProfile) -> Account:
        """
        Get the existing account or create it, as federated sign-in does on first use.
        """
        account = self.get_account(profile.account_id)
        if account:
            return account
        try:
            return self.create_account(profile)
        except AccountAlreadyExistsError:
            # Created concurrently by another sign-in
            account = self.get_account(profile.account_id)
            if account is None:
                raise AccountNotFoundError(profile.account_id)
            return account

    def get_subscription_tier(self, account_id: Optional[str]) -> SubscriptionTier:
        """Get the stored tier, or the default tier when it cannot be read."""
        if not account_id:
            return default_tier()
        try:
            account = self.get_account(account_id)
        except DocumentStoreError as e:
            logger.error(f"Error getting subscription tier for {account_id}: {e}")
            return default_tier()  # Safe default
        if account is None:
            return default_tier()
        return account.subscription_tier

    def change_subscription_tier(self, account_id: str, tier: Any) -> Account:
        """
        Move an account to another tier.

        Args:
            account_id: Account identifier
            tier: New tier, enum member or its string value

        Returns:
            Account: The account as stored after the change

        Raises:
            InvalidSubscriptionTierError: ``tier`` is not a known tier
            AccountNotFoundError: No record exists for ``account_id``
        """
        if not is_valid_tier(tier):
            raise InvalidSubscriptionTierError(tier)
        new_tier = SubscriptionTier(tier)
        previous_tier = self.get_subscription_tier(account_id)

        try:
            self.table.update_item(
                Key=_account_key(account_id),
                UpdateExpression="SET subscription_tier = :tier, updated_at = :updated_at",
                ConditionExpression="attribute_exists(PK)",
                ExpressionAttributeValues={
                    ":tier": new_tier.value,
                    ":updated_at": datetime.now(timezone.utc).isoformat(),
                },
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise AccountNotFoundError(account_id) from e
            raise DocumentStoreError(f"DynamoDB error: {e.response['Error']['Message']}") from e
        except BotoCoreError as e:
            raise DocumentStoreError(f"AWS connection error: {str(e)}") from e

        rank_change = tier_rank(new_tier) - tier_rank(previous_tier)
        direction = "Upgraded" if rank_change > 0 else "Downgraded" if rank_change < 0 else "Kept"
        logger.info(f"{direction} account {account_id} from {previous_tier.value} to {new_tier.value}")

        account = self.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def is_username_taken(self, username: str) -> bool:
        """Case-insensitive username lookup used during sign-up."""
        if not username:
            return False
        try:
            response = self.table.query(
                IndexName=USERNAME_INDEX_NAME,
                KeyConditionExpression=Key("username").eq(username.lower()),
                Limit=1,
            )
        except ClientError as e:
            raise DocumentStoreError(f"DynamoDB error: {e.response['Error']['Message']}") from e
        except BotoCoreError as e:
            raise DocumentStoreError(f"AWS connection error: {str(e)}") from e
        return bool(response.get("Items"))
