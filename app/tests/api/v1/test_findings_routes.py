from unittest.mock import patch

import pytest
from botocore.exceptions import EndpointConnectionError
from fastapi import HTTPException
from fastapi.testclient import TestClient

from api.dependencies.security_hub import get_security_hub_connection
from api.v1.routes import findings
from models.query import Qual
from modules.security_hub import schema
from tests.factories.security_hub import (
    REGION,
    make_client_error,
    make_finding,
    make_findings_pages,
    make_not_subscribed_error,
)
from utils.tests import create_test_app

test_app = create_test_app(findings.router)
client = TestClient(test_app)


@pytest.fixture
def use_connection(make_connection):
    """Serve the routes from a fake Security Hub connection."""

    def _use(**kwargs):
        connection = make_connection(**kwargs)
        test_app.dependency_overrides[get_security_hub_connection] = lambda: connection
        return connection

    yield _use
    test_app.dependency_overrides.clear()


def test_parse_filters():
    assert findings.parse_filters(
        ["company_name=AWS", "title<>foo", "confidence>=50"]
    ) == {
        "company_name": [Qual(operator="=", value="AWS")],
        "title": [Qual(operator="<>", value="foo")],
        "confidence": [Qual(operator=">=", value=50)],
    }


def test_parse_filters_keeps_empty_values():
    assert findings.parse_filters(["title="]) == {"title": [Qual(operator="=", value="")]}


@pytest.mark.parametrize(
    "raw_filter",
    ["company_name", "description=foo", "title>=foo", "confidence<>5", "confidence=high"],
)
def test_parse_filters_rejects_invalid_filters(raw_filter):
    with pytest.raises(HTTPException) as exc_info:
        findings.parse_filters([raw_filter])
    assert exc_info.value.status_code == 400


def test_get_findings_schema():
    response = client.get("/securityhub/schema")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "aws_securityhub_finding"
    names = [column["name"] for column in body["columns"]]
    assert names[0] == "id"
    assert names[-3:] == ["partition", "region", "account_id"]
    assert names == schema.column_names()
    assert body["columns"][-1] == {
        "name": "account_id",
        "type": "string",
        "description": schema.COMMON_COLUMNS["account_id"],
    }
    assert body["get_key_columns"] == [
        {"name": "id", "operators": ["="], "require": "required"}
    ]
    assert {"name": "confidence", "operators": ["=", ">=", "<="], "require": "optional"} in body["key_columns"]


def test_list_findings_returns_rows(use_connection):
    connection = use_connection(paginated_pages=make_findings_pages(2, 1))

    response = client.get("/securityhub/findings")

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert body["findings"][0]["title"] == "Finding title 1"
    assert body["findings"][0]["created_at"] == "2023-01-01T10:00:00+00:00"
    assert body["findings"][0]["region"] == REGION
    assert connection.client.paginator.calls == [{"PaginationConfig": {"PageSize": 100}}]


def test_list_findings_pushes_filters_and_limit(use_connection):
    connection = use_connection(paginated_pages=make_findings_pages(5))

    response = client.get(
        "/securityhub/findings",
        params={"filter": ["company_name=AWS", "workflow_state<>RESOLVED"], "limit": 2},
    )

    assert response.status_code == 200
    assert response.json()["count"] == 2
    assert connection.client.paginator.calls == [
        {
            "Filters": {
                "CompanyName": [{"Comparison": "EQUALS", "Value": "AWS"}],
                "WorkflowState": [{"Comparison": "NOT_EQUALS", "Value": "RESOLVED"}],
            },
            "PaginationConfig": {"PageSize": 2},
        }
    ]


def test_list_findings_applies_numeric_filters_after_retrieval(use_connection):
    pages = [
        {
            "Findings": [
                make_finding(1, Confidence=10),
                make_finding(2, Confidence=60),
                make_finding(3, Confidence=90),
                make_finding(4, Confidence=70),
            ]
        }
    ]
    connection = use_connection(paginated_pages=pages)

    response = client.get(
        "/securityhub/findings",
        params={"filter": ["confidence>=50", "confidence<=80"], "limit": 1},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["findings"][0]["confidence"] == 60
    # The limit is not pushed down when rows are filtered locally
    assert connection.client.paginator.calls == [{"PaginationConfig": {"PageSize": 100}}]


def test_list_findings_invalid_filter(use_connection):
    use_connection(paginated_pages=make_findings_pages(1))

    response = client.get("/securityhub/findings", params={"filter": "severity=HIGH"})

    assert response.status_code == 400
    assert response.json() == {"detail": "Column severity cannot be filtered"}


def test_list_findings_not_subscribed_is_empty(use_connection):
    use_connection(error=make_not_subscribed_error())

    response = client.get("/securityhub/findings")

    assert response.status_code == 200
    assert response.json() == {"findings": [], "count": 0}


def test_list_findings_aws_error(use_connection):
    use_connection(error=make_client_error(code="AccessDeniedException", message="denied"))

    response = client.get("/securityhub/findings")

    assert response.status_code == 502
    assert response.json() == {
        "detail": {"error_code": "AccessDeniedException", "message": "denied"}
    }


def test_list_findings_endpoint_connection_error(use_connection):
    use_connection(
        error=EndpointConnectionError(endpoint_url="https://securityhub.example")
    )

    response = client.get("/securityhub/findings")

    assert response.status_code == 502
    detail = response.json()["detail"]
    assert detail["error_code"] is None
    assert "https://securityhub.example" in detail["message"]


def test_list_findings_failed_page_status(use_connection):
    pages = [
        {"Findings": [make_finding(1)], "NextToken": "next"},
        {"Findings": [], "ResponseMetadata": {"HTTPStatusCode": 500}},
    ]
    use_connection(paginated_pages=pages)

    response = client.get("/securityhub/findings")

    assert response.status_code == 502
    assert response.json()["detail"]["error_code"] is None


def test_get_finding_by_arn(use_connection):
    finding = make_finding(1)
    connection = use_connection(api_responses={"get_findings": {"Findings": [finding]}})

    response = client.get(f"/securityhub/findings/{finding['Id']}")

    assert response.status_code == 200
    assert response.json()["id"] == finding["Id"]
    assert connection.client.calls == [
        (
            "get_findings",
            {"Filters": {"Id": [{"Comparison": "EQUALS", "Value": finding["Id"]}]}},
        )
    ]


def test_get_finding_not_found(use_connection):
    use_connection(api_responses={"get_findings": {"Findings": []}})

    response = client.get("/securityhub/findings/missing")

    assert response.status_code == 404
    assert response.json() == {"detail": "Finding not found"}


def test_get_finding_aws_error(use_connection):
    use_connection(error=make_client_error(code="InternalException", message="oops"))

    response = client.get("/securityhub/findings/foo")

    assert response.status_code == 502


def test_get_finding_endpoint_connection_error(use_connection):
    use_connection(
        error=EndpointConnectionError(endpoint_url="https://securityhub.example")
    )

    response = client.get("/securityhub/findings/foo")

    assert response.status_code == 502
    assert response.json()["detail"]["error_code"] is None


@patch("api.dependencies.security_hub.security_hub.connect")
def test_connection_dependency_failure(mock_connect):
    mock_connect.side_effect = make_client_error(code="ExpiredToken", message="expired")

    response = client.get("/securityhub/findings/foo")

    assert response.status_code == 502
    assert response.json() == {"detail": "Unable to connect to AWS Security Hub"}
