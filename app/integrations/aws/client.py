import inspect
from functools import wraps
from typing import Any, Dict, Iterator, Optional

import boto3  # type: ignore
from botocore.client import BaseClient  # type: ignore
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore
from core.config import settings
from core.logging import get_module_logger

logger = get_module_logger()

AWS_REGION = settings.aws.AWS_REGION
ENDPOINT_URL = settings.aws.ENDPOINT_URL
NOT_SUBSCRIBED_ERRS = settings.security_hub.NOT_SUBSCRIBED_ERRS


def is_not_subscribed_error(error: Exception) -> bool:
    """Check whether an error means the account or region is not subscribed to the service.

    Args:
        error (Exception): The error raised by the AWS call.

    Returns:
        bool: True when the error message matches one of the configured markers.
    """
    message = str(error).lower()
    return any(marker.lower() in message for marker in NOT_SUBSCRIBED_ERRS)


def _log_aws_error(func, error: Exception):
    if isinstance(error, ClientError):
        logger.error(
            "aws_client_error",
            module=func.__module__,
            function=func.__name__,
            error_code=error.response.get("Error", {}).get("Code"),
            error=str(error),
        )
    elif isinstance(error, BotoCoreError):
        logger.error(
            "boto_core_error",
            module=func.__module__,
            function=func.__name__,
            error=str(error),
        )
    else:
        logger.error(
            "unexpected_error",
            module=func.__module__,
            function=func.__name__,
            error=str(error),
        )


def handle_aws_api_errors(func):
    """Decorator to handle AWS API errors.

    A "not subscribed" error is an absence condition: the wrapped function
    returns None (or, for a generator, stops yielding). Any other error is
    logged and re-raised unchanged.

    Args:
        func (function): The function or generator function to decorate.

    Returns:
        The decorated function with error handling.
    """

    if inspect.isgeneratorfunction(func):

        @wraps(func)
        def generator_wrapper(*args, **kwargs):
            try:
                yield from func(*args, **kwargs)
            except Exception as e:
                if is_not_subscribed_error(e):
                    logger.debug(
                        "aws_service_not_subscribed",
                        module=func.__module__,
                        function=func.__name__,
                        error=str(e),
                    )
                    return
                _log_aws_error(func, e)
                raise

        return generator_wrapper

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if is_not_subscribed_error(e):
                logger.debug(
                    "aws_service_not_subscribed",
                    module=func.__module__,
                    function=func.__name__,
                    error=str(e),
                )
                return None
            _log_aws_error(func, e)
            raise

    return wrapper


def assume_role_session(role_arn, session_name="DefaultSession", region_name=None):
    """Assume an IAM role and return a session with temporary credentials.

    Args:
        role_arn (str): The ARN of the IAM role to assume.
        session_name (str): An identifier for the assumed role session.
        region_name (str, optional): The region the session is bound to.

    Returns:
        boto3.Session: A session with temporary credentials.
    """
    sts_config: Dict[str, Any] = {"region_name": region_name}
    if ENDPOINT_URL:
        sts_config["endpoint_url"] = ENDPOINT_URL
    sts_client = boto3.client("sts", **sts_config)
    assumed_role = sts_client.assume_role(
        RoleArn=role_arn, RoleSessionName=session_name
    )
    credentials = assumed_role["Credentials"]

    return boto3.Session(
        aws_access_key_id=credentials["AccessKeyId"],
        aws_secret_access_key=credentials["SecretAccessKey"],
        aws_session_token=credentials["SessionToken"],
        region_name=region_name,
    )


def get_aws_session(
    region_name: Optional[str] = None,
    role_arn: Optional[str] = None,
    session_name: str = "SecurityHubFindings",
):
    """Get a boto3 session for a region, assuming a role when one is given.

    Args:
        region_name (str, optional): AWS region. Defaults to the configured AWS_REGION.
        role_arn (str, optional): The ARN of the IAM role to assume.
        session_name (str): An identifier for the assumed role session.

    Returns:
        boto3.Session: The session.
    """
    region_name = region_name or AWS_REGION
    if role_arn:
        return assume_role_session(role_arn, session_name, region_name=region_name)
    return boto3.Session(region_name=region_name)


def get_aws_service_client(service_name, session, client_config=None) -> BaseClient:
    """Get an AWS service client from a session.

    Args:
        service_name (str): The name of the AWS service.
        session (boto3.Session): The session to build the client from.
        client_config (dict, optional): Additional keyword arguments for the service client.

    Returns:
        botocore.client.BaseClient: The service client.
    """
    if client_config is None:
        client_config = {}
    if ENDPOINT_URL and "endpoint_url" not in client_config:
        client_config["endpoint_url"] = ENDPOINT_URL
    return session.client(service_name, **client_config)


def _check_response_metadata(results: Dict[str, Any], service_name: str, method: str):
    metadata = results.get("ResponseMetadata")
    if metadata and metadata.get("HTTPStatusCode", 200) != 200:
        logger.error(
            "api_call_failed",
            service=service_name,
            method=method,
            status_code=metadata["HTTPStatusCode"],
        )
        raise RuntimeError(
            f"API call to {service_name}.{method} failed with status code {metadata['HTTPStatusCode']}"
        )


def execute_aws_api_call(client: BaseClient, method: str, **kwargs) -> Dict[str, Any]:
    """Execute a single, non-paginated AWS API call.

    Args:
        client (BaseClient): The service client.
        method (str): The method to call on the service client.
        **kwargs: Additional keyword arguments for the API call.

    Returns:
        dict: The API response.

    Raises:
        RuntimeError: If the response carries a non-200 status code.
    """
    results = getattr(client, method)(**kwargs)
    _check_response_metadata(results, client.meta.service_model.service_name, method)
    return results


def paginator(
    client: BaseClient, operation, page_size=None, **kwargs
) -> Iterator[Dict[str, Any]]:
    """Lazily iterate over the pages of an AWS operation.

    A page is only requested once the previous one has been consumed, so
    closing the iterator early stops fetching.

    Args:
        client (BaseClient): The service client.
        operation (str): The operation to paginate.
        page_size (int, optional): The number of items requested per page.
        **kwargs: Additional keyword arguments for the operation.

    Yields:
        dict: Each page of the operation's response.

    Reference: https://boto3.amazonaws.com/v1/documentation/api/latest/guide/paginators.html
    """
    service_name = client.meta.service_model.service_name
    if page_size is not None:
        kwargs["PaginationConfig"] = {"PageSize": page_size}

    for page in client.get_paginator(operation).paginate(**kwargs):
        _check_response_metadata(page, service_name, operation)
        yield page
