# controller/controller_dependencies.py
from fastapi import Request
from fastapi_limiter.depends import RateLimiter
from config.settings import settings
from core.clickhouse_client import ClickHouseClient
from core.staleness_probe import StalenessProbe
from model.metric import RetryPolicy, StalenessCriteria
from repository.metric_tree_repository import MetricTreeRepository
from service.autohide_scheduler import AutohideScheduler
from service.autohide_service import AutohideService

trigger_rate_limiter = RateLimiter(
    times=settings.RATE_LIMIT_TIMES, seconds=settings.RATE_LIMIT_SECONDS
)


def build_autohide_scheduler() -> AutohideScheduler:
    _tree = MetricTreeRepository()
    _probe = StalenessProbe(
        store=ClickHouseClient(),
        search=_tree,
        criteria=StalenessCriteria(
            max_values_count=settings.AUTOHIDE_MAX_VALUES_COUNT,
            missing_days=settings.AUTOHIDE_MISSING_DAYS,
        ),
        retry=RetryPolicy(
            attempts=settings.AUTOHIDE_RETRY_COUNT,
            wait=settings.AUTOHIDE_RETRY_WAIT,
        ),
    )
    _service = AutohideService(_tree, _probe, batch_size=settings.AUTOHIDE_BATCH_SIZE)
    return AutohideScheduler(
        _service,
        enabled=settings.AUTOHIDE_ENABLED,
        run_delay=settings.AUTOHIDE_RUN_DELAY,
        period=settings.AUTOHIDE_PERIOD,
    )


def get_autohide_scheduler(request: Request) -> AutohideScheduler:
    return request.app.state.autohide_scheduler


def get_metric_tree_repository() -> MetricTreeRepository:
    return MetricTreeRepository()
