from botocore.exceptions import ClientError  # type: ignore

ACCOUNT_ID = "123456789012"
REGION = "us-east-1"


def make_finding(i=1, prefix="", **overrides):
    finding = {
        "SchemaVersion": "2018-10-08",
        "Id": (
            f"arn:aws:securityhub:{REGION}:{ACCOUNT_ID}:subscription/"
            f"cis-aws-foundations-benchmark/v/1.2.0/1.{i}/finding/{prefix}finding-{i}"
        ),
        "ProductArn": f"arn:aws:securityhub:{REGION}::product/aws/securityhub",
        "ProductName": "Security Hub",
        "CompanyName": "AWS",
        "GeneratorId": f"arn:aws:securityhub:::ruleset/cis-aws-foundations-benchmark/v/1.2.0/rule/1.{i}",
        "AwsAccountId": ACCOUNT_ID,
        "Types": ["Software and Configuration Checks/Industry and Regulatory Standards"],
        "FirstObservedAt": "2023-01-01T10:00:00.000Z",
        "LastObservedAt": "2023-01-02T10:00:00.000Z",
        "CreatedAt": "2023-01-01T10:00:00.000Z",
        "UpdatedAt": "2023-01-02T10:00:00.000Z",
        "Severity": {"Label": "LOW", "Normalized": 1, "Original": "LOW"},
        "Confidence": 80,
        "Criticality": 40,
        "Title": f"{prefix}Finding title {i}",
        "Description": f"{prefix}Finding description {i}",
        "Remediation": {
            "Recommendation": {"Text": "Fix it", "Url": "https://docs.aws.amazon.com"}
        },
        "SourceUrl": f"https://example.com/{prefix}finding-{i}",
        "ProductFields": {"StandardsArn": "arn:aws:securityhub:::standards/cis"},
        "Resources": [{"Type": "AwsAccount", "Id": f"AWS::::Account:{ACCOUNT_ID}"}],
        "Compliance": {"Status": "FAILED"},
        "WorkflowState": "NEW",
        "Workflow": {"Status": "NEW"},
        "RecordState": "ACTIVE",
        "VerificationState": "UNKNOWN",
        "FindingProviderFields": {"Severity": {"Label": "LOW"}},
    }
    finding.update(overrides)
    return finding


def make_findings(n=3, prefix="", start=1):
    return [make_finding(i, prefix=prefix) for i in range(start, start + n)]


def make_findings_pages(*sizes, prefix=""):
    """Build GetFindings pages of the given sizes; all but the last carry a NextToken."""
    pages = []
    start = 1
    for index, size in enumerate(sizes):
        page = {"Findings": make_findings(size, prefix=prefix, start=start)}
        if index < len(sizes) - 1:
            page["NextToken"] = f"token-{index + 1}"
        pages.append(page)
        start += size
    return pages


def make_client_error(code="InvalidAccessException", message="error", operation="GetFindings"):
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def make_not_subscribed_error():
    return make_client_error(
        code="InvalidAccessException",
        message=f"Account {ACCOUNT_ID} is not subscribed to AWS Security Hub",
    )
