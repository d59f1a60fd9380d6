from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack, closing
from dataclasses import dataclass
from typing import List

from aibs_informatics_core.utils.json import JSON
from aibs_informatics_core.utils.os_operations import get_env_var
from psycopg2.extensions import connection as PGConnection

from data_replication_aws_lambda.common.constants import (
    MIRROR_ATOMIC_ENV_VAR,
    SOURCE_DB_PREFIX,
    TARGET_DB_PREFIX,
)
from data_replication_aws_lambda.common.handler import LambdaHandler
from data_replication_aws_lambda.common.models import select_model_fields
from data_replication_aws_lambda.handlers.database.connection import (
    check_credentials,
    ensure_table,
    fetch_rows,
    open_connection,
    resolve_table_name,
    truncate_table,
    upsert_rows,
)
from data_replication_aws_lambda.handlers.database.model import (
    DatabaseEndpoint,
    InventoryRow,
    MirrorTableRequest,
    MirrorTableResponse,
)

TRUTHY_VALUES = ("1", "true", "yes", "on")


@dataclass
class MirrorTableHandler(LambdaHandler[MirrorTableRequest, MirrorTableResponse]):
    """Replaces the contents of the target table with the rows of the source table.

    Both tables are created if absent (in parallel), the source rows are read
    ordered by ``item_id``, the target is truncated and every row is upserted
    one at a time.

    By default the truncate and the upserts run in autocommit mode, so a failure
    part way through leaves the target partially populated. Set ``atomic`` on the
    request (or ``MIRROR_ATOMIC=true``) to run them in one transaction that is
    rolled back on failure.
    """

    @classmethod
    def deserialize_request(cls, request: JSON) -> MirrorTableRequest:
        return MirrorTableRequest.from_dict(select_model_fields(MirrorTableRequest, request))

    def handle(self, request: MirrorTableRequest) -> MirrorTableResponse:
        table_name = resolve_table_name(request.table_name)
        source = DatabaseEndpoint.from_env(SOURCE_DB_PREFIX)
        target = DatabaseEndpoint.from_env(TARGET_DB_PREFIX)
        check_credentials(source, target)
        atomic = self.resolve_atomic(request)

        with ExitStack() as stack:
            source_conn = stack.enter_context(closing(open_connection(source)))
            target_conn = stack.enter_context(closing(open_connection(target)))

            self.ensure_tables(table_name, source_conn, target_conn)

            rows = fetch_rows(source_conn, table_name)
            self.logger.info(f"Fetched {len(rows)} rows from source {table_name}")

            if atomic:
                target_conn.autocommit = False
                with target_conn:
                    self.replace_rows(target_conn, table_name, rows)
            else:
                self.replace_rows(target_conn, table_name, rows)
            self.logger.info(f"Replicated {len(rows)} rows into target {table_name}")

        return MirrorTableResponse()

    def ensure_tables(self, table_name: str, *connections: PGConnection):
        with ThreadPoolExecutor(max_workers=len(connections)) as executor:
            futures = [executor.submit(ensure_table, conn, table_name) for conn in connections]
            for future in futures:
                future.result()

    def replace_rows(self, conn: PGConnection, table_name: str, rows: List[InventoryRow]):
        truncate_table(conn, table_name)
        upsert_rows(conn, table_name, rows)

    @classmethod
    def resolve_atomic(cls, request: MirrorTableRequest) -> bool:
        if request.atomic is not None:
            return request.atomic
        return (get_env_var(MIRROR_ATOMIC_ENV_VAR) or "").strip().lower() in TRUTHY_VALUES


mirror_table_handler = MirrorTableHandler.get_handler()
