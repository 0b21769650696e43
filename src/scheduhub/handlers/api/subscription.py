from aws_lambda_powertools import Logger
from aws_lambda_powertools.event_handler import APIGatewayRestResolver
from aws_lambda_powertools.event_handler.api_gateway import CORSConfig
from aws_lambda_powertools.event_handler.exceptions import (
    BadRequestError,
    InternalServerError,
    NotFoundError,
    UnauthorizedError,
)
from aws_lambda_powertools.utilities.typing import LambdaContext
from typing import Any, Dict

from scheduhub.models.errors import (
    AccountNotFoundError,
    DocumentStoreError,
    InvalidSubscriptionTierError,
)
from scheduhub.services.account_service import AccountService
from scheduhub.services.entitlement_evaluator import describe_tier, summarize_usage
from scheduhub.services.entitlement_table import all_tiers, tier_for_product
from scheduhub.services.workspace_service import WorkspaceService
from scheduhub.utils.auth import extract_user_id_from_event

# Initialize the logger
logger = Logger()

# Configure CORS
cors_config = CORSConfig(
    allow_origin="*",  # In production, specify your actual domain
)

# Initialize the APIGatewayRestResolver
app = APIGatewayRestResolver(cors=cors_config)


def _require_user_id() -> str:
    user_id = extract_user_id_from_event(app.current_event.raw_event)
    if not user_id:
        logger.error("No user_id found in JWT token")
        raise UnauthorizedError("Authentication required")
    return user_id


@app.get("/subscription")
def get_subscription() -> Dict[str, Any]:
    """
    Get the caller's tier and usage against it.
    """
    user_id = _require_user_id()

    try:
        account_service = AccountService()
        tier = account_service.get_subscription_tier(user_id)
        workspaces = WorkspaceService(account_service=account_service).list_owned_workspaces(user_id)
    except DocumentStoreError as exc:
        logger.error(f"Error loading subscription for {user_id}: {str(exc)}")
        raise InternalServerError("Failed to retrieve subscription information")

    return summarize_usage(tier, workspaces, user_id).model_dump(mode="json")


@app.get("/subscription/tiers")
def get_tiers() -> Dict[str, Any]:
    """
    Get every tier with its limits, lowest first.
    """
    return {"tiers": [describe_tier(tier).model_dump(mode="json") for tier in all_tiers()]}


@app.put("/subscription")
def change_subscription() -> Dict[str, Any]:
    """
    Change the caller's tier without payment.
    Expected body: {"tier": "basic|extended|unlimited"} or {"product_id": "scheduhub_extended_monthly"}
    """
    user_id = _require_user_id()

    try:
        body = app.current_event.json_body
    except (TypeError, ValueError) as exc:
        logger.error(f"Validation error: {str(exc)}")
        raise BadRequestError(f"Invalid request: {str(exc)}")
    if not isinstance(body, dict):
        raise BadRequestError("Invalid request: body must be a JSON object")

    tier = body.get("tier")
    if tier is None and "product_id" in body:
        tier = tier_for_product(body["product_id"])
        if tier is None:
            raise BadRequestError(f"Unknown product: {body['product_id']}")
    if tier is None:
        raise BadRequestError("Missing required field: tier")

    try:
        account = AccountService().change_subscription_tier(user_id, tier)
    except InvalidSubscriptionTierError as exc:
        logger.error(f"Validation error: {str(exc)}")
        raise BadRequestError(str(exc))
    except AccountNotFoundError as exc:
        logger.error(str(exc))
        raise NotFoundError("Account not found")
    except DocumentStoreError as exc:
        logger.error(f"Error changing subscription for {user_id}: {str(exc)}")
        raise InternalServerError("Failed to change subscription")

    return {
        "success": True,
        "message": f"Subscription changed to {account.subscription_tier.value}",
        "tier": describe_tier(account.subscription_tier).model_dump(mode="json"),
    }


def handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda function handler.
    """
    return app.resolve(event, context)
