"""DynamoDB backend selection.

The backend is resolved once at startup from ``DYNAMODB_CONFIG`` and the
resulting client is shared by every request.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from dicebox.config import Settings
from dicebox.errors import ConnectivityError, StartupError

logger = logging.getLogger(__name__)

REMOTE_SENTINEL = "Remote"

# DynamoDB Local accepts any credentials; these only need to be non-empty.
LOCAL_ENDPOINT_URL = "http://localhost:8000"
LOCAL_REGION = "us-east-1"
LOCAL_ACCESS_KEY_ID = "fakeMyKeyId"
LOCAL_SECRET_ACCESS_KEY = "fakeSecretAccessKey"

_DIAGNOSTIC_LIMIT = 10


class BackendKind(str, enum.Enum):
    """Which DynamoDB the service talks to."""

    local = "Local"
    remote = "Remote"


@dataclass(frozen=True)
class Backend:
    """A resolved backend: its kind and the boto3 DynamoDB client bound to it."""

    kind: BackendKind
    client: Any


def select_kind(dynamodb_config: str | None) -> BackendKind:
    """Map the DYNAMODB_CONFIG value to a backend kind, defaulting to Local."""
    if dynamodb_config == REMOTE_SENTINEL:
        return BackendKind.remote
    return BackendKind.local


def resolve_backend(settings: Settings) -> Backend:
    """Build the DynamoDB client for the configured backend.

    Local uses a fixed endpoint and placeholder credentials that only work
    against DynamoDB Local. Remote defers to boto3's default credential and
    region chain.

    Raises:
        StartupError: If boto3 cannot build a client, e.g. no region is configured.
    """
    kind = select_kind(settings.dynamodb_config)
    try:
        if kind is BackendKind.remote:
            client = boto3.client("dynamodb")
        else:
            client = boto3.client(
                "dynamodb",
                endpoint_url=LOCAL_ENDPOINT_URL,
                region_name=LOCAL_REGION,
                aws_access_key_id=LOCAL_ACCESS_KEY_ID,
                aws_secret_access_key=LOCAL_SECRET_ACCESS_KEY,
            )
    except BotoCoreError as exc:
        raise StartupError(f"Could not create {kind.value} DynamoDB client: {exc}") from exc
    logger.info("Using %s DynamoDB backend", kind.value)
    return Backend(kind=kind, client=client)


def check_connection(backend: Backend) -> None:
    """Run the startup connectivity diagnostic.

    Local is skipped. Remote lists a handful of tables and logs them.

    Raises:
        ConnectivityError: If the Remote listing call fails.
    """
    if backend.kind is BackendKind.local:
        logger.debug("Skipping connectivity check for local DynamoDB")
        return

    try:
        resp = backend.client.list_tables(Limit=_DIAGNOSTIC_LIMIT)
    except (BotoCoreError, ClientError) as exc:
        raise ConnectivityError(f"Could not reach DynamoDB: {exc}") from exc
    logger.info("Current DynamoDB tables: %s", resp.get("TableNames", []))
