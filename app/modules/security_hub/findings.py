"""Security Hub findings table.

Get and List operations for the aws_securityhub_finding table:

- get_finding / get_finding_row: single finding by ID
- list_findings: lazy stream of finding records with pushdown filters,
  page sizing and row quota
- query_findings: list_findings projected into output rows
"""

from typing import Any, Dict, Iterator, Optional

from core.config import settings
from core.logging import get_module_logger
from integrations.aws import security_hub
from integrations.aws.client import handle_aws_api_errors
from integrations.aws.security_hub import SecurityHubConnection
from models.query import QueryContext
from modules.security_hub.filters import build_findings_filters, unpushed_quals
from modules.security_hub.schema import COLUMNS

logger = get_module_logger()

MAX_PAGE_SIZE = settings.security_hub.MAX_PAGE_SIZE


def resolve_page_size(limit: Optional[int], max_page_size: int = MAX_PAGE_SIZE) -> int:
    """Page size for a query: never above what the row limit could use, never below 1."""
    if limit is not None and limit < max_page_size:
        return max(1, limit)
    return max_page_size


def project_finding(
    finding: Dict[str, Any], connection: Optional[SecurityHubConnection] = None
) -> Dict[str, Any]:
    """Project a finding record into an output row.

    Args:
        finding (dict): The finding as returned by GetFindings.
        connection (SecurityHubConnection, optional): Source of the common columns.

    Returns:
        dict: Column name to typed value.
    """
    row = {column.name: column.transform(finding) for column in COLUMNS}
    row["partition"] = connection.partition if connection else None
    row["region"] = connection.region if connection else None
    row["account_id"] = connection.account_id if connection else None
    return row


@handle_aws_api_errors
def get_finding(
    connection: SecurityHubConnection, finding_id: str
) -> Optional[Dict[str, Any]]:
    """Retrieves a single finding by its ID.

    Args:
        connection (SecurityHubConnection): The Security Hub connection.
        finding_id (str): The finding ID.

    Returns:
        dict: The finding, or None when the ID is empty, no finding matches,
        or Security Hub is not enabled for the account and region.
    """
    if not finding_id:
        return None

    logger.debug("security_hub_get_finding_started", finding_id=finding_id)
    findings = security_hub.get_findings(
        connection.client,
        {"Id": [{"Comparison": "EQUALS", "Value": finding_id}]},
    )
    if findings:
        return findings[0]
    return None


def get_finding_row(
    connection: SecurityHubConnection, finding_id: str
) -> Optional[Dict[str, Any]]:
    finding = get_finding(connection, finding_id)
    if finding is None:
        return None
    return project_finding(finding, connection)


@handle_aws_api_errors
def list_findings(
    connection: SecurityHubConnection, query_context: Optional[QueryContext] = None
) -> Iterator[Dict[str, Any]]:
    """Streams the findings matching a query.

    Records are yielded in the order Security Hub returns them. Once the
    query's row limit is reached no further page is requested.

    A row limit below 1 is an exhausted quota: nothing is yielded and no
    request is made. `resolve_page_size` only sizes the pages of a
    non-empty quota, which is why it never returns less than 1.

    Args:
        connection (SecurityHubConnection): The Security Hub connection.
        query_context (QueryContext, optional): Predicates and row limit.

    Yields:
        dict: Each finding record.
    """
    query_context = query_context or QueryContext()
    limit = query_context.limit
    if limit is not None and limit < 1:
        return

    filters = build_findings_filters(query_context.quals)
    page_size = resolve_page_size(limit)

    skipped = unpushed_quals(query_context.quals)
    if skipped:
        # Numeric ranges are not translated: the rows come back unfiltered on these columns
        logger.debug(
            "security_hub_quals_not_pushed_down",
            columns=sorted(skipped.keys()),
        )

    logger.debug(
        "security_hub_list_findings_started",
        filter_keys=list(filters.keys()),
        page_size=page_size,
        limit=limit,
    )

    emitted = 0
    for findings in security_hub.iter_findings_pages(
        connection.client, filters, page_size=page_size
    ):
        for finding in findings:
            yield finding
            emitted += 1
            if limit is not None and emitted >= limit:
                logger.debug("security_hub_list_findings_limit_reached", emitted=emitted)
                return

    logger.debug("security_hub_list_findings_completed", emitted=emitted)


def query_findings(
    connection: SecurityHubConnection, query_context: Optional[QueryContext] = None
) -> Iterator[Dict[str, Any]]:
    """Streams the output rows of the findings matching a query."""
    for finding in list_findings(connection, query_context):
        yield project_finding(finding, connection)
