"""Value transforms used by the findings table projections."""

from datetime import datetime
from typing import Any, Callable, Dict, Optional

SECURITY_HUB_ARN_MARKER = "arn:aws:securityhub"


def extract_standards_control_arn(finding_id: Optional[str]) -> Optional[str]:
    """Derive the standards control ARN from a Security Hub finding ID.

    "arn:aws:securityhub:us-east-1:123:subscription/cis-aws/v1.2.0/1.1/finding/abc"
    becomes "arn:aws:securityhub:us-east-1:123:control/cis-aws/v1.2.0/1.1".

    Args:
        finding_id (str): The finding ID.

    Returns:
        str: The control ARN, or None when the ID is not a Security Hub ARN.
    """
    if not finding_id or SECURITY_HUB_ARN_MARKER not in finding_id:
        return None
    return finding_id.split("/finding")[0].replace("subscription", "control", 1)


def to_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp as returned by Security Hub."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def to_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return int(value)


def from_field(key: str) -> Callable[[Dict[str, Any]], Any]:
    """Projection reading one top-level key of a finding."""

    def project(finding: Dict[str, Any]) -> Any:
        return finding.get(key)

    return project


def from_timestamp_field(key: str) -> Callable[[Dict[str, Any]], Optional[datetime]]:
    def project(finding: Dict[str, Any]) -> Optional[datetime]:
        return to_timestamp(finding.get(key))

    return project


def from_int_field(key: str) -> Callable[[Dict[str, Any]], Optional[int]]:
    def project(finding: Dict[str, Any]) -> Optional[int]:
        return to_int(finding.get(key))

    return project


def compliance_status(finding: Dict[str, Any]) -> Optional[str]:
    return (finding.get("Compliance") or {}).get("Status")


def standards_control_arn(finding: Dict[str, Any]) -> Optional[str]:
    return extract_standards_control_arn(finding.get("Id"))
