"""Static schema of the aws_securityhub_finding table.

Each column maps to an explicit projection function over the finding record
returned by Security Hub's GetFindings API. The key columns declare which
predicates a caller may push down; filters.py decides what is actually
translated into the remote request.
"""

from typing import Dict, List

from models.query import Column, ColumnType, KeyColumn
from modules.security_hub.transforms import (
    compliance_status,
    from_field,
    from_int_field,
    from_timestamp_field,
    standards_control_arn,
)

TABLE_NAME = "aws_securityhub_finding"
TABLE_DESCRIPTION = "AWS Security Hub Finding"

GET_KEY_COLUMN = KeyColumn(name="id", operators=("=",), require="required")

STRING_OPERATORS = ("=", "<>")
NUMERIC_OPERATORS = ("=", ">=", "<=")

LIST_KEY_COLUMNS: List[KeyColumn] = [
    KeyColumn(name="company_name", operators=STRING_OPERATORS),
    KeyColumn(name="compliance_status", operators=STRING_OPERATORS),
    KeyColumn(name="confidence", operators=NUMERIC_OPERATORS),
    KeyColumn(name="criticality", operators=NUMERIC_OPERATORS),
    KeyColumn(name="generator_id", operators=STRING_OPERATORS),
    KeyColumn(name="product_arn", operators=STRING_OPERATORS),
    KeyColumn(name="product_name", operators=STRING_OPERATORS),
    KeyColumn(name="record_state", operators=STRING_OPERATORS),
    KeyColumn(name="title", operators=STRING_OPERATORS),
    KeyColumn(name="verification_state", operators=STRING_OPERATORS),
    KeyColumn(name="workflow_state", operators=STRING_OPERATORS),
]

COLUMNS: List[Column] = [
    Column(
        name="id",
        type=ColumnType.STRING,
        description="The security findings provider-specific identifier for a finding.",
        transform=from_field("Id"),
    ),
    Column(
        name="arn",
        type=ColumnType.STRING,
        description="The Amazon Resource Name (ARN) for the finding.",
        transform=from_field("Id"),
    ),
    Column(
        name="company_name",
        type=ColumnType.STRING,
        description="The name of the company for the product that generated the finding.",
        transform=from_field("CompanyName"),
    ),
    Column(
        name="confidence",
        type=ColumnType.INT,
        description=(
            "A finding's confidence. Confidence is defined as the likelihood that a finding "
            "accurately identifies the behavior or issue that it was intended to identify."
        ),
        transform=from_int_field("Confidence"),
    ),
    Column(
        name="created_at",
        type=ColumnType.TIMESTAMP,
        description=(
            "Indicates when the security-findings provider created the potential security "
            "issue that a finding captured."
        ),
        transform=from_timestamp_field("CreatedAt"),
    ),
    Column(
        name="compliance_status",
        type=ColumnType.STRING,
        description="The result of a compliance standards check.",
        transform=compliance_status,
    ),
    Column(
        name="updated_at",
        type=ColumnType.TIMESTAMP,
        description="Indicates when the security-findings provider last updated the finding record.",
        transform=from_timestamp_field("UpdatedAt"),
    ),
    Column(
        name="criticality",
        type=ColumnType.INT,
        description="The level of importance assigned to the resources associated with the finding.",
        transform=from_int_field("Criticality"),
    ),
    Column(
        name="description",
        type=ColumnType.STRING,
        description="A finding's description.",
        transform=from_field("Description"),
    ),
    Column(
        name="first_observed_at",
        type=ColumnType.TIMESTAMP,
        description=(
            "Indicates when the security-findings provider first observed the potential "
            "security issue that a finding captured."
        ),
        transform=from_timestamp_field("FirstObservedAt"),
    ),
    Column(
        name="generator_id",
        type=ColumnType.STRING,
        description=(
            "The identifier for the solution-specific component (a discrete unit of logic) "
            "that generated a finding."
        ),
        transform=from_field("GeneratorId"),
    ),
    Column(
        name="last_observed_at",
        type=ColumnType.TIMESTAMP,
        description=(
            "Indicates when the security-findings provider most recently observed the "
            "potential security issue that a finding captured."
        ),
        transform=from_timestamp_field("LastObservedAt"),
    ),
    Column(
        name="product_arn",
        type=ColumnType.STRING,
        description="The ARN generated by Security Hub that uniquely identifies a product that generates findings.",
        transform=from_field("ProductArn"),
    ),
    Column(
        name="product_name",
        type=ColumnType.STRING,
        description="The name of the product that generated the finding.",
        transform=from_field("ProductName"),
    ),
    Column(
        name="record_state",
        type=ColumnType.STRING,
        description="The record state of a finding.",
        transform=from_field("RecordState"),
    ),
    Column(
        name="schema_version",
        type=ColumnType.STRING,
        description="The schema version that a finding is formatted for.",
        transform=from_field("SchemaVersion"),
    ),
    Column(
        name="source_url",
        type=ColumnType.STRING,
        description=(
            "A URL that links to a page about the current finding in the "
            "security-findings provider's solution."
        ),
        transform=from_field("SourceUrl"),
    ),
    Column(
        name="verification_state",
        type=ColumnType.STRING,
        description="Indicates the veracity of a finding.",
        transform=from_field("VerificationState"),
    ),
    Column(
        name="workflow_state",
        type=ColumnType.STRING,
        description="The workflow state of a finding.",
        transform=from_field("WorkflowState"),
    ),
    Column(
        name="standards_control_arn",
        type=ColumnType.STRING,
        description="The ARN of the security standard control.",
        transform=standards_control_arn,
    ),
    Column(
        name="action",
        type=ColumnType.JSON,
        description="Provides details about an action that affects or that was taken on a resource.",
        transform=from_field("Action"),
    ),
    Column(
        name="compliance",
        type=ColumnType.JSON,
        description=(
            "This data type is exclusive to findings that are generated as the result of a "
            "check run against a specific rule in a supported security standard, such as CIS "
            "Amazon Web Services Foundations."
        ),
        transform=from_field("Compliance"),
    ),
    Column(
        name="finding_provider_fields",
        type=ColumnType.JSON,
        description=(
            "In a BatchImportFindings request, finding providers use FindingProviderFields to "
            "provide and update their own values for confidence, criticality, related "
            "findings, severity, and types."
        ),
        transform=from_field("FindingProviderFields"),
    ),
    Column(
        name="malware",
        type=ColumnType.JSON,
        description="A list of malware related to a finding.",
        transform=from_field("Malware"),
    ),
    Column(
        name="network",
        type=ColumnType.JSON,
        description="The details of network-related information about a finding.",
        transform=from_field("Network"),
    ),
    Column(
        name="network_path",
        type=ColumnType.JSON,
        description=(
            "Provides information about a network path that is relevant to a finding. Each "
            "entry under NetworkPath represents a component of that path."
        ),
        transform=from_field("NetworkPath"),
    ),
    Column(
        name="note",
        type=ColumnType.JSON,
        description="A user-defined note added to a finding.",
        transform=from_field("Note"),
    ),
    Column(
        name="patch_summary",
        type=ColumnType.JSON,
        description=(
            "Provides an overview of the patch compliance status for an instance against a "
            "selected compliance standard."
        ),
        transform=from_field("PatchSummary"),
    ),
    Column(
        name="process",
        type=ColumnType.JSON,
        description="The details of process-related information about a finding.",
        transform=from_field("Process"),
    ),
    Column(
        name="product_fields",
        type=ColumnType.JSON,
        description=(
            "A data type where security-findings providers can include additional "
            "solution-specific details that aren't part of the defined AwsSecurityFinding "
            "format."
        ),
        transform=from_field("ProductFields"),
    ),
    Column(
        name="related_findings",
        type=ColumnType.JSON,
        description="A list of related findings.",
        transform=from_field("RelatedFindings"),
    ),
    Column(
        name="remediation",
        type=ColumnType.JSON,
        description="A data type that describes the remediation options for a finding.",
        transform=from_field("Remediation"),
    ),
    Column(
        name="resources",
        type=ColumnType.JSON,
        description="A set of resource data types that describe the resources that the finding refers to.",
        transform=from_field("Resources"),
    ),
    Column(
        name="severity",
        type=ColumnType.JSON,
        description="A finding's severity.",
        transform=from_field("Severity"),
    ),
    Column(
        name="threat_intel_indicators",
        type=ColumnType.JSON,
        description="Threat intelligence details related to a finding.",
        transform=from_field("ThreatIntelIndicators"),
    ),
    Column(
        name="user_defined_fields",
        type=ColumnType.JSON,
        description="A list of name/value string pairs associated with the finding.",
        transform=from_field("UserDefinedFields"),
    ),
    Column(
        name="vulnerabilities",
        type=ColumnType.JSON,
        description="Provides a list of vulnerabilities associated with the findings.",
        transform=from_field("Vulnerabilities"),
    ),
    # Standard columns
    Column(
        name="title",
        type=ColumnType.STRING,
        description="A finding's title.",
        transform=from_field("Title"),
    ),
]

# Filled from the connection rather than the finding record
COMMON_COLUMNS: Dict[str, str] = {
    "partition": "The AWS partition in which the resource is located (aws, aws-cn, or aws-us-gov).",
    "region": "The AWS Region in which the resource is located.",
    "account_id": "The AWS Account ID in which the resource is located.",
}

COLUMNS_BY_NAME: Dict[str, Column] = {column.name: column for column in COLUMNS}
KEY_COLUMNS_BY_NAME: Dict[str, KeyColumn] = {
    key_column.name: key_column for key_column in LIST_KEY_COLUMNS
}


def column_names() -> List[str]:
    """All output column names, finding columns first then the common columns."""
    return [column.name for column in COLUMNS] + list(COMMON_COLUMNS)
