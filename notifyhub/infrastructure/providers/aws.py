"""Shared helpers for the boto3 based adapters."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from notifyhub.domain.exceptions import ProviderConfigurationError


def build_boto3_client(
    service: str,
    *,
    region: str,
    access_key_id: str | None,
    secret_access_key: str | None,
    timeout: float,
) -> Any:
    """Create a boto3 client with explicit credentials and bounded timeouts."""

    if not (access_key_id and secret_access_key):
        raise ProviderConfigurationError(
            f"AWS credentials must be provided to use {service.upper()}"
        )
    return boto3.client(
        service,
        region_name=region,
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
        config=Config(
            connect_timeout=timeout,
            read_timeout=timeout,
            retries={"max_attempts": 2},
        ),
    )


def describe_aws_error(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        return f"{error.get('Code', 'Unknown')}: {error.get('Message', str(exc))}"
    return str(exc)


__all__ = ["build_boto3_client", "describe_aws_error"]
