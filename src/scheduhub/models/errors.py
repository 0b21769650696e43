from typing import Optional

from scheduhub.models.subscription import Denied


class ScheduHubError(Exception):
    """Base exception for the ScheduHub backend"""

    pass


class DocumentStoreError(ScheduHubError):
    """Raised when DynamoDB rejects a request or cannot be reached"""

    pass


class AccountAlreadyExistsError(ScheduHubError):
    def __init__(self, account_id: str):
        super().__init__(f"Account {account_id} already exists.")
        self.account_id = account_id


class AccountNotFoundError(ScheduHubError):
    def __init__(self, account_id: str):
        super().__init__(f"Account {account_id} not found.")
        self.account_id = account_id


class InvalidSubscriptionTierError(ScheduHubError):
    def __init__(self, tier: Optional[str]):
        super().__init__(f"Invalid subscription tier: {tier!r}")
        self.tier = tier


class WorkspaceNotFoundError(ScheduHubError):
    def __init__(self, workspace_id: str):
        super().__init__(f"Workspace {workspace_id} not found.")
        self.workspace_id = workspace_id


class EmployeeAlreadyAddedError(ScheduHubError):
    def __init__(self, workspace_id: str, user_id: str):
        super().__init__(f"User {user_id} is already an employee of workspace {workspace_id}.")
        self.workspace_id = workspace_id
        self.user_id = user_id


class EntitlementLimitError(ScheduHubError):
    """Raised when a subscription limit refuses a write"""

    def __init__(self, decision: Denied):
        super().__init__(f"{decision.reason.value} (limit {decision.limit})")
        self.decision = decision
