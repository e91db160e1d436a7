"""Persisting roll results to DynamoDB."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from dicebox.dice import RollResult
from dicebox.errors import WriteError
from dicebox.provisioning import PARTITION_KEY, SORT_KEY, ensure_table

logger = logging.getLogger(__name__)

PAYLOAD_ATTRIBUTE = "result"
ROLL_ID_ATTRIBUTE = "rollId"


@dataclass(frozen=True)
class StorageRecord:
    """One persisted roll, keyed by (name, created_at).

    ``created_at`` is the timestamp plus a ``#<roll_id>`` suffix (see
    make_sort_key), so reading a record back needs the ``created_at`` returned
    by persist, not just the time it was written.
    """

    name: str
    created_at: str
    roll_id: str
    payload: str

    def to_item(self) -> dict[str, dict[str, str]]:
        """Return the record in DynamoDB attribute-value form."""
        return {
            PARTITION_KEY: {"S": self.name},
            SORT_KEY: {"S": self.created_at},
            ROLL_ID_ATTRIBUTE: {"S": self.roll_id},
            PAYLOAD_ATTRIBUTE: {"S": self.payload},
        }

    @classmethod
    def from_item(cls, item: dict[str, dict[str, str]]) -> StorageRecord:
        return cls(
            name=item[PARTITION_KEY]["S"],
            created_at=item[SORT_KEY]["S"],
            roll_id=item[ROLL_ID_ATTRIBUTE]["S"],
            payload=item[PAYLOAD_ATTRIBUTE]["S"],
        )

    def decode(self) -> RollResult:
        return RollResult.model_validate_json(self.payload)


def make_sort_key(now: datetime, roll_id: str) -> str:
    """Build a ``createdAt`` value: RFC3339 UTC timestamp, then ``#``, then the roll id.

    The timestamp prefix keeps a partition ordered by time; the id suffix keeps
    keys unique when two writes land on the same clock tick.
    """
    stamp = now.astimezone(timezone.utc).isoformat(timespec="microseconds")
    return f"{stamp}#{roll_id}"


def build_record(
    logical_name: str,
    result: RollResult,
    *,
    now: datetime | None = None,
    roll_id: str | None = None,
) -> StorageRecord:
    now = now or datetime.now(timezone.utc)
    roll_id = roll_id or uuid.uuid4().hex
    return StorageRecord(
        name=logical_name,
        created_at=make_sort_key(now, roll_id),
        roll_id=roll_id,
        payload=result.model_dump_json(),
    )


def persist(
    client: Any,
    table_name: str,
    logical_name: str,
    result: RollResult,
    *,
    now: datetime | None = None,
    roll_id: str | None = None,
) -> StorageRecord:
    """Write a roll result to ``table_name``, provisioning the table first.

    Args:
        client: A boto3 DynamoDB client.
        table_name: Target table.
        logical_name: Partition key value for the record.
        result: The roll to store.
        now: Timestamp to record. Defaults to the current UTC time.
        roll_id: Unique id for the record. Defaults to a fresh uuid4.

    Returns:
        The StorageRecord that was written.

    Raises:
        ProvisionError: If the table could not be provisioned.
        WriteError: If PutItem fails.
    """
    ensure_table(client, table_name)

    record = build_record(logical_name, result, now=now, roll_id=roll_id)
    try:
        client.put_item(TableName=table_name, Item=record.to_item())
    except (BotoCoreError, ClientError) as exc:
        raise WriteError(
            f"Could not write roll {record.roll_id} to {table_name}: {exc}",
            table_name=table_name,
        ) from exc

    logger.debug("Stored roll %s in %s", record.roll_id, table_name)
    return record


def load(client: Any, table_name: str, name: str, created_at: str) -> RollResult | None:
    """Fetch a stored roll by its key, or None if there is no such item."""
    resp = client.get_item(
        TableName=table_name,
        Key={PARTITION_KEY: {"S": name}, SORT_KEY: {"S": created_at}},
    )
    item = resp.get("Item")
    if item is None:
        return None
    return StorageRecord.from_item(item).decode()
