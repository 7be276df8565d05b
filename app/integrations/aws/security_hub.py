"""AWS Security Hub integration module."""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from core.config import settings
from core.logging import get_module_logger
from integrations.aws.client import (
    execute_aws_api_call,
    get_aws_service_client,
    get_aws_session,
    paginator,
)

logger = get_module_logger()
SECURITY_HUB_ROLE_ARN = settings.aws.SECURITY_HUB_ROLE_ARN


@dataclass
class SecurityHubConnection:
    """Security Hub client bound to one region and account.

    Attributes:
        client: The boto3 securityhub client.
        region: The region the client talks to.
        account_id: The caller's AWS account ID, if known.
        partition: The AWS partition (aws, aws-cn, aws-us-gov).
    """

    client: Any
    region: str
    account_id: Optional[str] = None
    partition: str = "aws"


def connect(region=None, role_arn=None) -> SecurityHubConnection:
    """Create a Security Hub connection for a region.

    The caller identity is looked up once so the common columns (account ID
    and partition) can be filled for every row.

    Args:
        region (str, optional): AWS region. Defaults to the configured AWS_REGION.
        role_arn (str, optional): Role to assume. Defaults to AWS_SECURITY_HUB_ROLE_ARN.

    Returns:
        SecurityHubConnection: The connection.
    """
    session = get_aws_session(region, role_arn or SECURITY_HUB_ROLE_ARN or None)
    client = get_aws_service_client("securityhub", session)
    identity = get_aws_service_client("sts", session).get_caller_identity()
    partition = identity["Arn"].split(":")[1]
    logger.debug(
        "security_hub_connected",
        region=session.region_name,
        account_id=identity["Account"],
        partition=partition,
    )
    return SecurityHubConnection(
        client=client,
        region=session.region_name,
        account_id=identity["Account"],
        partition=partition,
    )


def get_findings(client, filters: Dict[str, List[dict]]) -> List[dict]:
    """Retrieves a single page of findings matching the filters.

    Args:
        client: The securityhub client.
        filters (dict): AwsSecurityFindingFilters to apply.

    Returns:
        list: The finding objects of the response.
    """
    logger.debug("security_hub_get_findings_started", filter_keys=list(filters.keys()))
    response = execute_aws_api_call(client, "get_findings", Filters=filters)
    findings = response.get("Findings", [])
    logger.debug("security_hub_get_findings_completed", finding_count=len(findings))
    return findings


def iter_findings_pages(
    client, filters: Optional[Dict[str, List[dict]]] = None, page_size=None
) -> Iterator[List[dict]]:
    """Lazily iterates over the pages of findings.

    Args:
        client: The securityhub client.
        filters (dict, optional): AwsSecurityFindingFilters to apply. Omitted from the request when empty.
        page_size (int, optional): Number of findings requested per page.

    Yields:
        list: The findings of each page, in the order returned by Security Hub.
    """
    params: Dict[str, Any] = {}
    if filters:
        params["Filters"] = filters

    for page_number, page in enumerate(
        paginator(client, "get_findings", page_size=page_size, **params), start=1
    ):
        findings = page.get("Findings", [])
        logger.debug(
            "security_hub_findings_page_received",
            page=page_number,
            finding_count=len(findings),
            has_next=bool(page.get("NextToken")),
        )
        yield findings
