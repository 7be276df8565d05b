"""Translation of query predicates into Security Hub finding filters.

Only the string key columns are pushed down, as StringFilter entries of
AwsSecurityFindingFilters. The numeric key columns (confidence, criticality)
accept "=", ">=" and "<=" in the schema contract but are not translated;
those predicates must be applied to the returned rows by the caller.
"""

import operator
from typing import Any, Dict, List

from models.query import Qual

# Column name -> AwsSecurityFindingFilters field, in translation order
STRING_FILTER_FIELDS: Dict[str, str] = {
    "company_name": "CompanyName",
    "compliance_status": "ComplianceStatus",
    "generator_id": "GeneratorId",
    "product_arn": "ProductArn",
    "product_name": "ProductName",
    "record_state": "RecordState",
    "title": "Title",
    "verification_state": "VerificationState",
    "workflow_state": "WorkflowState",
}

STRING_COMPARISONS: Dict[str, str] = {
    "=": "EQUALS",
    "<>": "NOT_EQUALS",
}

ROW_OPERATORS = {
    "=": operator.eq,
    "<>": operator.ne,
    ">=": operator.ge,
    "<=": operator.le,
}


def build_findings_filters(quals: Dict[str, List[Qual]]) -> Dict[str, List[dict]]:
    """Build the AwsSecurityFindingFilters for a set of query predicates.

    Args:
        quals (dict): Predicates keyed by column name.

    Returns:
        dict: The filters; empty when nothing can be pushed down.
    """
    findings_filters: Dict[str, List[dict]] = {}

    for column, field in STRING_FILTER_FIELDS.items():
        for qual in quals.get(column) or []:
            if qual.value is None or qual.value == "":
                continue
            comparison = STRING_COMPARISONS.get(qual.operator)
            if comparison is None:
                continue
            findings_filters.setdefault(field, []).append(
                {"Comparison": comparison, "Value": str(qual.value)}
            )

    return findings_filters


def unpushed_quals(quals: Dict[str, List[Qual]]) -> Dict[str, List[Qual]]:
    """Return the predicates build_findings_filters leaves out of the request.

    Empty-valued predicates are not reported; they are not meaningful filters.
    """
    remaining: Dict[str, List[Qual]] = {}
    for column, column_quals in quals.items():
        for qual in column_quals or []:
            if qual.value is None or qual.value == "":
                continue
            if column in STRING_FILTER_FIELDS and qual.operator in STRING_COMPARISONS:
                continue
            remaining.setdefault(column, []).append(qual)
    return remaining


def row_matches(row: Dict[str, Any], quals: Dict[str, List[Qual]]) -> bool:
    """Evaluate predicates against an output row after retrieval.

    Used for the predicates that unpushed_quals reports. A row with no value
    for a filtered column does not match.
    """
    for column, column_quals in quals.items():
        value = row.get(column)
        for qual in column_quals or []:
            if value is None:
                return False
            if not ROW_OPERATORS[qual.operator](value, qual.value):
                return False
    return True
