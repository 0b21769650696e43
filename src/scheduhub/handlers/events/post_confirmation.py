from typing import Dict, Any
from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.typing import LambdaContext

from scheduhub.models.account import AuthProvider, IdentityProfile
from scheduhub.models.errors import ScheduHubError
from scheduhub.services.account_service import AccountService

# Initialize the logger
logger = Logger()


def extract_identity_profile(event: Dict[str, Any]) -> IdentityProfile:
    """Build the identity profile from a Cognito post-confirmation event."""
    try:
        attributes = event["request"]["userAttributes"]
        account_id = attributes["sub"]
    except KeyError as e:
        logger.error(f"Missing required user attribute: {e}")
        raise ValueError(f"Invalid Cognito event structure: missing {e}")

    # Federated users arrive with an identities attribute
    provider = AuthProvider.GOOGLE if "identities" in attributes else AuthProvider.PASSWORD

    return IdentityProfile(
        account_id=account_id,
        email=attributes.get("email"),
        display_name=attributes.get("name"),
        username=attributes.get("preferred_username"),
        photo_url=attributes.get("picture"),
        provider=provider,
    )


@logger.inject_lambda_context
def handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Cognito Post-Confirmation Lambda handler.

    Creates the account record, on the default tier, when a user completes
    registration. Existing records are left untouched.

    Input: Cognito Post-Confirmation trigger event
    Output: Same event (required by Cognito)
    """
    logger.info("Post-confirmation Lambda triggered", extra={
        "trigger_source": event.get("triggerSource", "unknown"),
        "user_pool_id": event.get("userPoolId", "unknown"),
    })

    try:
        profile = extract_identity_profile(event)
        account = AccountService().get_or_create_account(profile)
        logger.info(f"Account {account.account_id} ready on tier {account.subscription_tier.value}")
    except (ValueError, ScheduHubError) as e:
        # Raising here would block the registration in Cognito
        logger.error(f"Post-confirmation failed but allowing registration to proceed: {e}")

    return event
