from typing import Optional

from fastapi import HTTPException, Query
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore

from core.logging import get_module_logger
from integrations.aws import security_hub
from integrations.aws.security_hub import SecurityHubConnection

logger = get_module_logger()


def get_security_hub_connection(
    region: Optional[str] = Query(default=None, description="AWS region to query"),
) -> SecurityHubConnection:
    """Dependency providing a Security Hub connection for the requested region."""
    try:
        return security_hub.connect(region=region)
    except (BotoCoreError, ClientError) as e:
        logger.error("security_hub_connection_failed", region=region, error=str(e))
        raise HTTPException(
            status_code=502, detail="Unable to connect to AWS Security Hub"
        ) from e
