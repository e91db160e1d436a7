"""Table provisioning: make sure the roll table exists before writing to it.

Creation is idempotent. The listing call is only a shortcut; the create call
itself treats ``ResourceInUseException`` (table already exists or is being
created) as success, so concurrent first writers cannot fail each other.
"""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from dicebox.errors import ProvisionError

logger = logging.getLogger(__name__)

PARTITION_KEY = "name"
SORT_KEY = "createdAt"
BILLING_MODE = "PAY_PER_REQUEST"

KEY_SCHEMA: list[dict[str, str]] = [
    {"AttributeName": PARTITION_KEY, "KeyType": "HASH"},
    {"AttributeName": SORT_KEY, "KeyType": "RANGE"},
]

ATTRIBUTE_DEFINITIONS: list[dict[str, str]] = [
    {"AttributeName": PARTITION_KEY, "AttributeType": "S"},
    {"AttributeName": SORT_KEY, "AttributeType": "S"},
]

_LIST_LIMIT = 100


def table_exists(client: Any, table_name: str) -> bool:
    """Return True if ``table_name`` appears in a bounded ListTables call.

    A False result is not authoritative when the account has more tables than
    the listing limit; ensure_table copes with that through idempotent create.
    """
    resp = client.list_tables(Limit=_LIST_LIMIT)
    return table_name in resp.get("TableNames", [])


def _wait_until_active(client: Any, table_name: str) -> None:
    client.get_waiter("table_exists").wait(TableName=table_name)


def ensure_table(client: Any, table_name: str) -> None:
    """Create ``table_name`` with the roll key schema if it does not exist.

    Args:
        client: A boto3 DynamoDB client.
        table_name: Name of the table to provision.

    Raises:
        ProvisionError: If listing or creation fails for any reason other than
            the table already existing.
    """
    try:
        if table_exists(client, table_name):
            return

        try:
            resp = client.create_table(
                TableName=table_name,
                KeySchema=KEY_SCHEMA,
                AttributeDefinitions=ATTRIBUTE_DEFINITIONS,
                BillingMode=BILLING_MODE,
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") != "ResourceInUseException":
                raise
            logger.info("Table %s already exists or is being created", table_name)
        else:
            logger.info("Created table %s: %s", table_name, resp.get("TableDescription"))

        _wait_until_active(client, table_name)
    except (BotoCoreError, ClientError) as exc:
        logger.error("Failed to provision table %s: %s", table_name, exc)
        raise ProvisionError(
            f"Could not provision table {table_name}: {exc}", table_name=table_name
        ) from exc
