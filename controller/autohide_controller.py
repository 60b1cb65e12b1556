# controller/autohide_controller.py
import logging
from fastapi import APIRouter, Depends, status
from model.api import AutohideStatusResponse, TriggerResponse
from service.autohide_scheduler import AutohideScheduler
from util.constants import InternalURIs
from util.enums import ErrorMessage
from util.errors import AppError
from controller.controller_dependencies import (
    get_autohide_scheduler,
    trigger_rate_limiter,
)

logger = logging.getLogger(__name__)

autohide_router = APIRouter()


@autohide_router.get(
    InternalURIs.AUTOHIDE_STATUS,
    response_model=AutohideStatusResponse,
    status_code=status.HTTP_200_OK,
)
async def autohide_status(
    scheduler: AutohideScheduler = Depends(get_autohide_scheduler),
) -> AutohideStatusResponse:
    return scheduler.snapshot()


@autohide_router.post(
    InternalURIs.AUTOHIDE_RUN,
    response_model=TriggerResponse,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(trigger_rate_limiter)],
)
async def trigger_autohide(
    scheduler: AutohideScheduler = Depends(get_autohide_scheduler),
) -> TriggerResponse:
    # Runs on the scheduler's own task, never alongside a scheduled pass
    if not scheduler.trigger():
        logger.warning("autohide.trigger.rejected enabled=%s", scheduler.enabled)
        raise AppError.of(ErrorMessage.AUTOHIDE_DISABLED)
    logger.info("autohide.trigger.accepted")
    return TriggerResponse(ok=True)
