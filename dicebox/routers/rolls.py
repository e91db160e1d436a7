"""Dice roll route: roll, persist best-effort, and always answer with the roll."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from dicebox.backend import Backend
from dicebox.config import Settings
from dicebox.dependencies import get_backend, get_settings
from dicebox.dice import RollResult, roll
from dicebox.errors import PersistenceError
from dicebox.records import persist

logger = logging.getLogger(__name__)

# Largest count accepted in the URL (unsigned 32-bit).
MAX_DICE_COUNT = 2**32 - 1

router = APIRouter()


def roll_and_store(dice_count: int, settings: Settings, backend: Backend) -> str:
    """Roll, try to persist, and return the roll as JSON.

    Blocking: rolling large counts and the boto3 calls both take time, so the
    route runs this in the threadpool. A storage failure must never cost the
    caller their roll.
    """
    result = roll(dice_count)
    try:
        persist(backend.client, settings.table_name, settings.record_name, result)
    except PersistenceError:
        logger.exception("Failed to persist roll of %d dice to %s", dice_count, settings.table_name)
    return result.model_dump_json()


@router.get("/roll/{dice_count}", response_model=RollResult)
async def roll_dice(
    dice_count: Annotated[int, Path(ge=0, le=MAX_DICE_COUNT)],
    settings: Settings = Depends(get_settings),
    backend: Backend = Depends(get_backend),
) -> Response:
    # Serialized off the loop too; a large roll would otherwise stall it here.
    body = await run_in_threadpool(roll_and_store, dice_count, settings, backend)
    return Response(content=body, media_type="application/json")
