import re
from itertools import islice
from typing import Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError  # type: ignore
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder

from api.dependencies.rate_limits import get_limiter
from api.dependencies.security_hub import get_security_hub_connection
from core.logging import get_module_logger
from integrations.aws.security_hub import SecurityHubConnection
from models.query import ColumnType, KeyColumn, Qual, QueryContext
from modules.security_hub import findings
from modules.security_hub.filters import row_matches, unpushed_quals
from modules.security_hub.schema import (
    COLUMNS_BY_NAME,
    COMMON_COLUMNS,
    GET_KEY_COLUMN,
    KEY_COLUMNS_BY_NAME,
    LIST_KEY_COLUMNS,
    TABLE_DESCRIPTION,
    TABLE_NAME,
    column_names,
)

logger = get_module_logger()

router = APIRouter(tags=["Security Hub"])
limiter = get_limiter()

# column, operator, value: "company_name=AWS", "confidence>=50", "title<>foo"
FILTER_PATTERN = re.compile(r"^(?P<column>[a-z_]+)(?P<operator><>|>=|<=|=)(?P<value>.*)$")


def parse_filters(raw_filters: List[str]) -> Dict[str, List[Qual]]:
    """Parse `filter` query parameters into predicates on the table's key columns.

    Args:
        raw_filters (list): Filters such as "company_name=AWS" or "confidence>=50".

    Raises:
        HTTPException: 400 if a filter is malformed, names a column that is not
        a key column, uses an operator the column does not accept, or gives a
        non-integer value for an integer column.

    Returns:
        dict: Predicates keyed by column name.
    """
    quals: Dict[str, List[Qual]] = {}
    for raw_filter in raw_filters:
        match = FILTER_PATTERN.match(raw_filter)
        if not match:
            raise HTTPException(status_code=400, detail=f"Invalid filter: {raw_filter}")

        column, operator, value = match.group("column", "operator", "value")
        key_column = KEY_COLUMNS_BY_NAME.get(column)
        if key_column is None:
            raise HTTPException(
                status_code=400, detail=f"Column {column} cannot be filtered"
            )
        if not key_column.accepts(operator):
            raise HTTPException(
                status_code=400,
                detail=f"Operator {operator} is not supported on column {column}",
            )

        if COLUMNS_BY_NAME[column].type == ColumnType.INT:
            try:
                quals.setdefault(column, []).append(
                    Qual(operator=operator, value=int(value))
                )
            except ValueError as e:
                raise HTTPException(
                    status_code=400, detail=f"Column {column} expects an integer value"
                ) from e
        else:
            quals.setdefault(column, []).append(Qual(operator=operator, value=value))
    return quals


def _aws_error(e: Exception) -> HTTPException:
    """Map a failed Security Hub call to a 502 response."""
    if isinstance(e, ClientError):
        error = e.response.get("Error", {})
        detail = {"error_code": error.get("Code"), "message": error.get("Message", str(e))}
    else:
        detail = {"error_code": None, "message": str(e)}
    return HTTPException(status_code=502, detail=detail)


@router.get("/securityhub/schema")
def get_findings_schema():
    """Describe the aws_securityhub_finding table and its filterable columns."""
    columns = []
    for name in column_names():
        column = COLUMNS_BY_NAME.get(name)
        if column is None:
            columns.append(
                {
                    "name": name,
                    "type": ColumnType.STRING.value,
                    "description": COMMON_COLUMNS[name],
                }
            )
        else:
            columns.append(
                {
                    "name": name,
                    "type": column.type.value,
                    "description": column.description,
                }
            )

    return {
        "name": TABLE_NAME,
        "description": TABLE_DESCRIPTION,
        "columns": columns,
        "get_key_columns": [_describe_key_column(GET_KEY_COLUMN)],
        "key_columns": [_describe_key_column(k) for k in LIST_KEY_COLUMNS],
    }


def _describe_key_column(key_column: KeyColumn) -> dict:
    return {
        "name": key_column.name,
        "operators": list(key_column.operators),
        "require": key_column.require,
    }


@router.get("/securityhub/findings")
@limiter.limit("30/minute")
def list_findings(
    request: Request,  # pylint: disable=unused-argument
    raw_filters: List[str] = Query(default=[], alias="filter"),
    limit: Optional[int] = Query(default=None, ge=0),
    connection: SecurityHubConnection = Depends(get_security_hub_connection),
):
    """List Security Hub findings as table rows.

    String predicates are pushed down to Security Hub. Predicates Security Hub
    cannot evaluate (numeric ranges on confidence and criticality) are applied
    to the returned rows here, in which case the row limit is applied after
    that filtering instead of being pushed down.
    """
    quals = parse_filters(raw_filters)
    post_filters = unpushed_quals(quals)

    try:
        if post_filters:
            rows = (
                row
                for row in findings.query_findings(
                    connection, QueryContext(quals=quals)
                )
                if row_matches(row, post_filters)
            )
            if limit is not None:
                rows = islice(rows, limit)
            results = list(rows)
        else:
            results = list(
                findings.query_findings(
                    connection, QueryContext(quals=quals, limit=limit)
                )
            )
    except (BotoCoreError, ClientError, RuntimeError) as e:
        raise _aws_error(e) from e

    logger.info(
        "security_hub_findings_listed",
        region=connection.region,
        filter_columns=sorted(quals.keys()),
        count=len(results),
    )
    return {"findings": jsonable_encoder(results), "count": len(results)}


@router.get("/securityhub/findings/{finding_id:path}")
@limiter.limit("60/minute")
def get_finding(
    request: Request,  # pylint: disable=unused-argument
    finding_id: str,
    connection: SecurityHubConnection = Depends(get_security_hub_connection),
):
    """Get a single Security Hub finding row by its ID."""
    try:
        row = findings.get_finding_row(connection, finding_id)
    except (BotoCoreError, ClientError, RuntimeError) as e:
        raise _aws_error(e) from e

    if row is None:
        raise HTTPException(status_code=404, detail="Finding not found")
    return jsonable_encoder(row)
