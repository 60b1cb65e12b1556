# core/clickhouse_client.py
import json
import logging
from typing import Dict, List, Optional
import httpx
from config.settings import settings
from model.metric import StalenessCriteria
from util.errors import StoreQueryError
from util.timing import timed

logger = logging.getLogger(__name__)

# today() - N keeps the cutoff on a calendar-day boundary, not a rolling 24h window
STALE_PATHS_QUERY = (
    "SELECT Path, count() AS cnt, max(Timestamp) AS ts "
    "FROM {table:Identifier} "
    "WHERE Path >= {min_path:String} AND Path <= {max_path:String} "
    "GROUP BY Path "
    "HAVING cnt < {max_values:UInt32} "
    "AND ts < toUInt32(toDateTime(today() - {missing_days:UInt32})) "
    "FORMAT JSONEachRow"
)


def _parse_paths(raw: str) -> List[str]:
    out: List[str] = []
    for line in raw.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            row = json.loads(line)
        except json.JSONDecodeError as e:
            raise StoreQueryError(f"Malformed ClickHouse row: {line[:200]}") from e
        if not isinstance(row, dict):
            raise StoreQueryError(f"Unexpected ClickHouse row: {line[:200]}")
        path = row.get("Path")
        if path:
            out.append(str(path))
    return out


class ClickHouseClient:
    """
    Staleness range queries over the ClickHouse HTTP interface.

    Values travel as server-side typed parameters (param_<name>), never spliced
    into the SQL text.
    """

    def __init__(
        self,
        url: str = settings.CLICKHOUSE_URL,
        user: str = settings.CLICKHOUSE_USER,
        password: str = settings.CLICKHOUSE_PASSWORD,
        table: str = settings.CLICKHOUSE_TABLE,
        timeout: float = settings.CLICKHOUSE_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._url = url
        self._table = table
        self._headers: Dict[str, str] = {
            "X-ClickHouse-User": user,
            "X-ClickHouse-Key": password,
        }
        self._timeout = httpx.Timeout(timeout, connect=5.0)
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def find_stale(
        self, min_key: str, max_key: str, criteria: StalenessCriteria
    ) -> List[str]:
        params = {
            "param_table": self._table,
            "param_min_path": min_key,
            "param_max_path": max_key,
            "param_max_values": str(criteria.max_values_count),
            "param_missing_days": str(criteria.missing_days),
        }
        try:
            with timed(logger, "clickhouse.stale_paths", table=self._table):
                async with self._client() as client:
                    res = await client.post(
                        self._url,
                        params=params,
                        headers=self._headers,
                        content=STALE_PATHS_QUERY.encode("utf-8"),
                    )
        except httpx.RequestError as e:
            logger.error("clickhouse.request_error err=%s", type(e).__name__)
            raise StoreQueryError(f"ClickHouse request failed: {e}") from e

        if res.status_code // 100 != 2:
            logger.error("clickhouse.bad_status %d", res.status_code)
            raise StoreQueryError(
                f"ClickHouse error {res.status_code}: {res.text[:500]}",
                status_code=res.status_code,
            )

        return _parse_paths(res.text)
