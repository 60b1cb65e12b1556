# controller/metric_controller.py
from fastapi import APIRouter, Depends, Query
from model.api import MetricStatusResponse
from repository.metric_tree_repository import MetricTreeRepository
from util.constants import InternalURIs
from util.enums import ErrorMessage
from util.errors import AppError
from controller.controller_dependencies import get_metric_tree_repository

metric_router = APIRouter()


@metric_router.get(InternalURIs.METRIC_STATUS, response_model=MetricStatusResponse)
async def metric_status(
    name: str = Query(..., min_length=1),
    tree: MetricTreeRepository = Depends(get_metric_tree_repository),
) -> MetricStatusResponse:
    current = await tree.get_status(name)
    if current is None:
        raise AppError.of(ErrorMessage.METRIC_NOT_FOUND)
    return MetricStatusResponse(name=name, status=current)
