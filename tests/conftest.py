"""Shared test fixtures."""

import boto3
import pytest
from moto import mock_aws

from src.config import get_settings
from src.logging.config import get_logging_config

TEST_REGION = "us-east-1"


@pytest.fixture(autouse=True)
def _clear_environment(monkeypatch):
    """Clear environment variables that affect settings, and use fake AWS credentials."""
    env_vars_to_clear = [
        "SERVICE_NAME",
        "ENVIRONMENT",
        "REGION",
        "AWS_REGION",
        "TABLE_NAME",
        "BUCKET_NAME",
        "QUEUE_URL",
        "CACHE_SIZE_MB",
        "WARMUP_PARAMETER_NAME",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "LOG_SDK_CALLS",
        "AWS_PROFILE",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)

    get_settings.cache_clear()
    get_logging_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_logging_config.cache_clear()


@pytest.fixture()
def aws():
    """Run the test against moto's in-memory AWS."""
    with mock_aws():
        yield


@pytest.fixture()
def single_table(aws):
    """Create a PK/SK table named test-table with the inverted GSI1 index."""
    dynamodb = boto3.resource("dynamodb", region_name=TEST_REGION)
    table = dynamodb.create_table(
        TableName="test-table",
        KeySchema=[
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "GSI1",
                "KeySchema": [
                    {"AttributeName": "SK", "KeyType": "HASH"},
                    {"AttributeName": "PK", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    table.wait_until_exists()
    return table


@pytest.fixture()
def probe_table(aws, monkeypatch):
    """Create the lowercase pk/sk table the harness stack provisions, as TABLE_NAME."""
    monkeypatch.setenv("TABLE_NAME", "probe-table")
    dynamodb = boto3.resource("dynamodb", region_name=TEST_REGION)
    table = dynamodb.create_table(
        TableName="probe-table",
        KeySchema=[
            {"AttributeName": "pk", "KeyType": "HASH"},
            {"AttributeName": "sk", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "pk", "AttributeType": "S"},
            {"AttributeName": "sk", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    table.wait_until_exists()
    return table
