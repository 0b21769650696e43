import pytest

from tests.fixtures.ddb import get_accounts_table_name, get_workspaces_table_name
from tests.fixtures.events import MockContext


@pytest.fixture(autouse=True)
def aws_environment(monkeypatch):
    """Fake credentials and test table names for every test."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    monkeypatch.setenv("ACCOUNTS_TABLE_NAME", get_accounts_table_name())
    monkeypatch.setenv("WORKSPACES_TABLE_NAME", get_workspaces_table_name())


@pytest.fixture
def lambda_context():
    return MockContext()
