import os
from unittest import mock

import pytest


@pytest.fixture(scope="function")
def aws_credentials_fixture():
    """Set testing credentials for mocked AWS resources and
    avoid accidentally hitting anything live with boto3.
    """
    # Clear os.environ dict (will be restored after fixture is finished)
    with mock.patch.dict(os.environ, clear=True):
        os.environ["AWS_ACCESS_KEY_ID"] = "testing"
        os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
        os.environ["AWS_SECURITY_TOKEN"] = "testing"
        os.environ["AWS_SESSION_TOKEN"] = "testing"
        os.environ["AWS_DEFAULT_REGION"] = "us-west-2"
        os.environ["AWS_REGION"] = "us-west-2"
        yield


@pytest.fixture(scope="function")
def replication_env(aws_credentials_fixture):
    """Environment of a deployed replication function (buckets and database endpoints)."""
    os.environ["SOURCE_BUCKET"] = "source-bucket"
    os.environ["DEST_BUCKET"] = "backup-bucket"
    os.environ["TABLE_NAME"] = "inventory_sample"
    os.environ["DB_USER"] = "replicator"
    os.environ["DB_PASSWORD"] = "secret"
    os.environ["SOURCE_DB_HOST"] = "primary.db.local"
    os.environ["TARGET_DB_HOST"] = "backup.db.local"
    os.environ["SOURCE_DB_NAME"] = "inventory"
    os.environ["TARGET_DB_NAME"] = "inventory"
    yield
