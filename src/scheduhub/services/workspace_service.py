"""
Workspace Service for workspace records and the limit checks guarding them.

Every write that a subscription limit governs re-reads a fresh snapshot and
runs the entitlement evaluator right before writing.
"""

import os
import uuid
from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError
from typing import Any, Dict, List, Optional

from scheduhub.models.errors import (
    DocumentStoreError,
    EmployeeAlreadyAddedError,
    EntitlementLimitError,
    WorkspaceNotFoundError,
)
from scheduhub.models.subscription import Denied
from scheduhub.models.workspace import Employee, Workspace
from scheduhub.services.account_service import AccountService
from scheduhub.services.aws import get_dynamodb_resource, iterate_pages
from scheduhub.services.entitlement_evaluator import (
    can_create_workspace,
    can_workspace_add_employee,
    count_owned_workspaces,
)

logger = Logger()

OWNER_ID_INDEX_NAME = "OwnerIdIndex"


def get_workspaces_table_name() -> str:
    return os.environ.get("WORKSPACES_TABLE_NAME", "sh-workspaces")


def _to_item(workspace: Workspace) -> Dict[str, Any]:
    return workspace.model_dump(mode="json", exclude_none=True)


def _dump_employees(employees: List[Employee]) -> List[Dict[str, Any]]:
    return [employee.model_dump(mode="json", exclude_none=True) for employee in employees]


class WorkspaceService:
    """Service for reading and writing workspace records."""

    def __init__(self, table_name: Optional[str] = None, account_service: Optional[AccountService] = None):
        self.table_name = table_name or get_workspaces_table_name()
        self.account_service = account_service or AccountService()
        self._table = None

    @property
    def table(self):
        """Lazy initialization of DynamoDB table"""
        if self._table is None:
            self._table = get_dynamodb_resource().Table(self.table_name)
        return self._table

    def get_workspace(self, workspace_id: str) -> Optional[Workspace]:
        try:
            response = self.table.get_item(Key={"workspace_id": workspace_id})
        except ClientError as e:
            raise DocumentStoreError(f"DynamoDB error: {e.response['Error']['Message']}") from e
        except BotoCoreError as e:
            raise DocumentStoreError(f"AWS connection error: {str(e)}") from e

        item = response.get("Item")
        if not item:
            logger.warning(f"No workspace found with ID {workspace_id}")
            return None
        return Workspace(**item)

    def _require_workspace(self, workspace_id: str) -> Workspace:
        workspace = self.get_workspace(workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(workspace_id)
        return workspace

    def list_owned_workspaces(self, account_id: str) -> List[Workspace]:
        """Workspaces owned by ``account_id``, read through the owner index."""
        try:
            items = list(iterate_pages(
                self.table.query,
                IndexName=OWNER_ID_INDEX_NAME,
                KeyConditionExpression=Key("owner_id").eq(account_id),
            ))
        except ClientError as e:
            raise DocumentStoreError(f"DynamoDB error: {e.response['Error']['Message']}") from e
        except BotoCoreError as e:
            raise DocumentStoreError(f"AWS connection error: {str(e)}") from e
        return [Workspace(**item) for item in items]

    def list_workspaces_for_account(self, account_id: str) -> List[Workspace]:
        """
        Workspaces the account owns, followed by those it is an employee of.

        Args:
            account_id: Account identifier

        Returns:
            List of workspaces without duplicates
        """
        workspaces = self.list_owned_workspaces(account_id)
        seen = {workspace.workspace_id for workspace in workspaces}

        try:
            items = list(iterate_pages(self.table.scan))
        except ClientError as e:
            raise DocumentStoreError(f"DynamoDB error: {e.response['Error']['Message']}") from e
        except BotoCoreError as e:
            raise DocumentStoreError(f"AWS connection error: {str(e)}") from e

        for item in items:
            workspace = Workspace(**item)
            if workspace.workspace_id not in seen and account_id in workspace.member_ids:
                workspaces.append(workspace)
                seen.add(workspace.workspace_id)
        return workspaces

    def create_workspace(self, owner_id: str, name: str) -> Workspace:
        """
        Create a workspace if the owner's tier still allows another one.

        Raises:
            EntitlementLimitError: The owner already has as many workspaces as the tier allows
        """
        tier = self.account_service.get_subscription_tier(owner_id)
        owned_count = count_owned_workspaces(self.list_owned_workspaces(owner_id), owner_id)
        decision = can_create_workspace(tier, owned_count)

        if isinstance(decision, Denied):
            logger.warning(
                f"Workspace creation refused for {owner_id}",
                extra={"tier": tier.value, "owned": owned_count, "limit": decision.limit},
            )
            raise EntitlementLimitError(decision)

        workspace = Workspace(workspace_id=str(uuid.uuid4()), name=name, owner_id=owner_id)
        try:
            self.table.put_item(
                Item=_to_item(workspace),
                ConditionExpression="attribute_not_exists(workspace_id)",  # Prevent overwrites
            )
        except ClientError as e:
            raise DocumentStoreError(f"DynamoDB error: {e.response['Error']['Message']}") from e
        except BotoCoreError as e:
            raise DocumentStoreError(f"AWS connection error: {str(e)}") from e

        logger.info(f"Created workspace {workspace.workspace_id} for owner {owner_id}")
        return workspace

    def _save_employees(self, workspace_id: str, employees: List[Employee]) -> Workspace:
        try:
            response = self.table.update_item(
                Key={"workspace_id": workspace_id},
                UpdateExpression="SET employees = :employees",
                ConditionExpression="attribute_exists(workspace_id)",
                ExpressionAttributeValues={":employees": _dump_employees(employees)},
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise WorkspaceNotFoundError(workspace_id) from e
            raise DocumentStoreError(f"DynamoDB error: {e.response['Error']['Message']}") from e
        except BotoCoreError as e:
            raise DocumentStoreError(f"AWS connection error: {str(e)}") from e
        return Workspace(**response["Attributes"])

    def add_employee(self, workspace_id: str, employee: Employee) -> Workspace:
        """
        Add an employee, governed by the workspace owner's tier.

        Raises:
            WorkspaceNotFoundError: Unknown workspace
            EmployeeAlreadyAddedError: The user is already listed
            EntitlementLimitError: The workspace is at its member limit
        """
        workspace = self._require_workspace(workspace_id)
        if employee.user_id in workspace.member_ids:
            raise EmployeeAlreadyAddedError(workspace_id, employee.user_id)

        tier = self.account_service.get_subscription_tier(workspace.owner_id)
        decision = can_workspace_add_employee(tier, workspace)
        if isinstance(decision, Denied):
            logger.warning(
                f"Employee {employee.user_id} refused for workspace {workspace_id}",
                extra={"tier": tier.value, "current": decision.current_count, "limit": decision.limit},
            )
            raise EntitlementLimitError(decision)

        updated = self._save_employees(workspace_id, [*workspace.employees, employee])
        logger.info(f"Added employee {employee.user_id} to workspace {workspace_id}")
        return updated

    def remove_employee(self, workspace_id: str, user_id: str) -> Workspace:
        workspace = self._require_workspace(workspace_id)
        if user_id not in workspace.member_ids:
            logger.warning(f"User {user_id} is not an employee of workspace {workspace_id}")
            return workspace

        remaining = [employee for employee in workspace.employees if employee.user_id != user_id]
        updated = self._save_employees(workspace_id, remaining)
        logger.info(f"Removed employee {user_id} from workspace {workspace_id}")
        return updated
