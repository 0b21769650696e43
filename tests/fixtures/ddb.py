import boto3
from mypy_boto3_dynamodb.service_resource import Table  # type: ignore

from scheduhub.services.aws import get_region_name


def get_accounts_table_name() -> str:
    """
    Retrieve the name of the DynamoDB table used for storing accounts.

    Returns:
        str: The name of the DynamoDB table.
    """
    return "test-accounts-table"


def get_workspaces_table_name() -> str:
    """
    Retrieve the name of the DynamoDB table used for storing workspaces.

    Returns:
        str: The name of the DynamoDB table.
    """
    return "test-workspaces-table"


def create_accounts_table() -> Table:
    """Create a mock DynamoDB table for accounts with UsernameIndex GSI."""
    dynamodb_resource = boto3.resource("dynamodb", region_name=get_region_name())
    table = dynamodb_resource.create_table(
        TableName=get_accounts_table_name(),
        KeySchema=[
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
            {"AttributeName": "username", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "UsernameIndex",
                "KeySchema": [{"AttributeName": "username", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
        BillingMode="PAY_PER_REQUEST",
    )

    # Wait for table to be created
    table.wait_until_exists()

    return table


def create_workspaces_table() -> Table:
    """Create a mock DynamoDB table for workspaces with OwnerIdIndex GSI."""
    dynamodb_resource = boto3.resource("dynamodb", region_name=get_region_name())
    table = dynamodb_resource.create_table(
        TableName=get_workspaces_table_name(),
        KeySchema=[{"AttributeName": "workspace_id", "KeyType": "HASH"}],
        AttributeDefinitions=[
            {"AttributeName": "workspace_id", "AttributeType": "S"},
            {"AttributeName": "owner_id", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "OwnerIdIndex",
                "KeySchema": [{"AttributeName": "owner_id", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
        BillingMode="PAY_PER_REQUEST",
    )

    # Wait for table to be created
    table.wait_until_exists()

    return table
