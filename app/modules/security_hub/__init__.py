"""Security Hub findings module.

Exposes AWS Security Hub findings as rows of the aws_securityhub_finding
table: schema declaration, pushdown filter translation, and the Get/List
operations over a SecurityHubConnection.
"""

from modules.security_hub.filters import build_findings_filters, unpushed_quals
from modules.security_hub.findings import (
    get_finding,
    get_finding_row,
    list_findings,
    project_finding,
    query_findings,
    resolve_page_size,
)
from modules.security_hub.schema import COLUMNS, LIST_KEY_COLUMNS, TABLE_NAME
from modules.security_hub.transforms import extract_standards_control_arn

__all__ = [
    "COLUMNS",
    "LIST_KEY_COLUMNS",
    "TABLE_NAME",
    "build_findings_filters",
    "extract_standards_control_arn",
    "get_finding",
    "get_finding_row",
    "list_findings",
    "project_finding",
    "query_findings",
    "resolve_page_size",
    "unpushed_quals",
]
