import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `core.config`) works during pytest collection.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest
from integrations.aws.security_hub import SecurityHubConnection
from tests.factories.security_hub import ACCOUNT_ID, REGION, make_findings_pages
from tests.fixtures.aws_clients import FakeClient


@pytest.fixture
def make_connection():
    """Build a SecurityHubConnection around a fake securityhub client."""

    def _make(paginated_pages=None, api_responses=None, error=None):
        client = FakeClient(
            paginated_pages=paginated_pages,
            api_responses=api_responses,
            error=error,
        )
        return SecurityHubConnection(
            client=client, region=REGION, account_id=ACCOUNT_ID, partition="aws"
        )

    return _make


@pytest.fixture
def three_page_connection(make_connection):
    """Connection whose paginator returns pages of 100, 100 and 50 findings."""
    return make_connection(paginated_pages=make_findings_pages(100, 100, 50))
