"""Sink for client-side log lines."""

import logging

import structlog
from fastapi import APIRouter, status

from bocado.schemas.log import ClientLogEntry

logger = structlog.get_logger("bocado.client")

router = APIRouter(tags=["log"])


@router.post("/log", status_code=status.HTTP_202_ACCEPTED)
def client_log(entry: ClientLogEntry) -> dict[str, bool]:
    level = logging.getLevelName(entry.level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logger.log(level, "client_log", module=entry.module, client_message=entry.message, data=entry.data)
    return {"accepted": True}
