import json
from contextlib import closing
from dataclasses import dataclass
from typing import Any, List, Optional

from aibs_informatics_core.utils.json import JSON
from aibs_informatics_core.utils.os_operations import get_env_var

from data_replication_aws_lambda.common.constants import SEED_ROWS_ENV_VAR, SOURCE_DB_PREFIX
from data_replication_aws_lambda.common.handler import LambdaHandler
from data_replication_aws_lambda.common.logging import get_service_logger
from data_replication_aws_lambda.common.models import select_model_fields
from data_replication_aws_lambda.handlers.database.connection import (
    check_credentials,
    count_rows,
    ensure_table,
    insert_rows_if_absent,
    open_connection,
    resolve_table_name,
)
from data_replication_aws_lambda.handlers.database.model import (
    DEFAULT_SEED_ROWS,
    DatabaseEndpoint,
    InventoryRow,
    SeedRowsResult,
    SeedTableRequest,
    SeedTableResponse,
)

logger = get_service_logger(__name__)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _as_inventory_row(entry: Any) -> Optional[InventoryRow]:
    if not isinstance(entry, dict):
        return None
    item_id, item_name, quantity = (entry.get(k) for k in ("item_id", "item_name", "quantity"))
    if not _is_int(item_id) or not isinstance(item_name, str) or not _is_int(quantity):
        return None
    return InventoryRow(item_id=item_id, item_name=item_name, quantity=quantity)


def parse_seed_rows(raw: Optional[str]) -> SeedRowsResult:
    """Interpret a ``SEED_ROWS`` value.

    The override is used only when it is a non-empty JSON array whose every entry
    has an integer ``item_id``, a string ``item_name`` and an integer ``quantity``.
    Anything else falls back to the default rows, with the reason recorded.
    """
    if not raw:
        return SeedRowsResult(rows=list(DEFAULT_SEED_ROWS), source="default")

    try:
        parsed = json.loads(raw)
    except ValueError as e:
        return SeedRowsResult(
            rows=list(DEFAULT_SEED_ROWS), source="default", reason=f"not valid JSON: {e}"
        )

    if not isinstance(parsed, list) or not parsed:
        return SeedRowsResult(
            rows=list(DEFAULT_SEED_ROWS), source="default", reason="not a non-empty JSON array"
        )

    rows: List[InventoryRow] = []
    for index, entry in enumerate(parsed):
        row = _as_inventory_row(entry)
        if row is None:
            return SeedRowsResult(
                rows=list(DEFAULT_SEED_ROWS),
                source="default",
                reason=f"entry {index} is not a valid inventory row: {entry!r}",
            )
        rows.append(row)
    return SeedRowsResult(rows=rows, source="override")


def resolve_seed_rows() -> List[InventoryRow]:
    raw = get_env_var(SEED_ROWS_ENV_VAR)
    result = parse_seed_rows(raw)
    if result.reason:
        logger.warning(
            f"Failed to use {SEED_ROWS_ENV_VAR}, falling back to defaults: {result.reason}"
        )
    return result.rows


@dataclass
class SeedTableHandler(LambdaHandler[SeedTableRequest, SeedTableResponse]):
    """Populates the source table with seed rows if, and only if, it is empty."""

    @classmethod
    def deserialize_request(cls, request: JSON) -> SeedTableRequest:
        return SeedTableRequest.from_dict(select_model_fields(SeedTableRequest, request))

    @classmethod
    def serialize_response(cls, response: SeedTableResponse) -> JSON:
        return {k: v for k, v in response.to_dict().items() if v is not None}

    def handle(self, request: SeedTableRequest) -> SeedTableResponse:
        table_name = resolve_table_name(request.table_name)
        endpoint = DatabaseEndpoint.from_env(SOURCE_DB_PREFIX)
        check_credentials(endpoint)

        with closing(open_connection(endpoint)) as conn:
            ensure_table(conn, table_name)

            row_count = count_rows(conn, table_name)
            if row_count > 0:
                self.logger.info(
                    f"Table {table_name} already seeded ({row_count} rows), skipping."
                )
                return SeedTableResponse(seeded=False, existing_rows=row_count)

            seeds = resolve_seed_rows()
            insert_rows_if_absent(conn, table_name, seeds)
            self.logger.info(f"Seeded {len(seeds)} rows into {table_name}")
            return SeedTableResponse(seeded=True, rows=len(seeds))


seed_table_handler = SeedTableHandler.get_handler()
