import boto3
import os
from boto3.resources.base import ServiceResource
from typing import Any, Dict, Iterator, Optional


def get_region_name() -> Optional[str]:
    """
    Get the AWS region name from environment variable.
    Uses AWS_REGION if set, otherwise lets boto3 use its default region resolution.

    Returns:
        str: The AWS region name or None to let boto3 handle region resolution.
    """
    return os.getenv("AWS_REGION")


def get_dynamodb_resource() -> ServiceResource:
    """
    Get a DynamoDB resource instance.

    Returns:
        boto3.resources.base.ServiceResource: The DynamoDB resource.
    """
    region = get_region_name()
    if region:
        return boto3.resource("dynamodb", region_name=region)
    # Let boto3 use default region resolution
    return boto3.resource("dynamodb")


def iterate_pages(operation: Any, **kwargs: Any) -> Iterator[Dict[str, Any]]:
    """
    Yield every item of a paginated DynamoDB query or scan.

    Args:
        operation: Bound ``Table.query`` or ``Table.scan``
        **kwargs: Request parameters

    Yields:
        dict: Items, page after page
    """
    while True:
        response = operation(**kwargs)
        yield from response.get("Items", [])
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return
        kwargs["ExclusiveStartKey"] = last_key
