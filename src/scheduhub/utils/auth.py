"""
Authentication utilities for extracting user information from API Gateway events.
"""
from typing import Dict, Any, Optional
from aws_lambda_powertools import Logger

logger = Logger()


def get_all_user_claims(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract all user claims from API Gateway event context.

    When API Gateway uses Cognito authorization, it validates the JWT and
    places the claims under ``requestContext.authorizer.claims``.

    Args:
        event: API Gateway event dictionary

    Returns:
        Dictionary of all JWT claims
    """
    request_context = event.get("requestContext") or {}
    authorizer = request_context.get("authorizer") or {}
    return authorizer.get("claims") or {}


def extract_user_id_from_event(event: Dict[str, Any]) -> Optional[str]:
    """
    Extract the account id (``sub`` claim) from the API Gateway event.

    Returns:
        Account identifier, or None if the request carries no claims
    """
    user_id = get_all_user_claims(event).get("sub")
    if user_id:
        logger.debug(f"Successfully extracted user_id: {user_id}")
        return user_id
    logger.warning("No user_id found in JWT claims")
    return None
