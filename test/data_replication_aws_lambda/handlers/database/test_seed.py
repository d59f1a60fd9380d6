import json
from datetime import datetime, timezone
from test.data_replication_aws_lambda.handlers.database.base import (
    FIXED_NOW,
    DatabaseHandlerTestCase,
    FakeInventoryConnection,
)

import pytest

from data_replication_aws_lambda.common.exceptions import ConfigurationError, InvalidIdentifier
from data_replication_aws_lambda.common.handler import LambdaHandlerType
from data_replication_aws_lambda.handlers.database.connection import (
    INSERT_IF_ABSENT_SQL,
    compose,
)
from data_replication_aws_lambda.handlers.database.model import DEFAULT_SEED_ROWS, InventoryRow
from data_replication_aws_lambda.handlers.database.seed import SeedTableHandler, parse_seed_rows

T1 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

DEFAULT_TABLE = [
    (1, "Widget Alpha", 25, FIXED_NOW),
    (2, "Widget Beta", 12, FIXED_NOW),
    (3, "Widget Gamma", 7, FIXED_NOW),
]


class SeedTableHandlerTests(DatabaseHandlerTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.unset_env_vars("SEED_ROWS")

    @property
    def handler(self) -> LambdaHandlerType:
        return SeedTableHandler.get_handler()

    def connection(self, rows=(), exists=True) -> FakeInventoryConnection:
        conn = FakeInventoryConnection(self.TABLE_NAME, rows, exists=exists)
        self.use_connections(conn)
        return conn

    def test__handles__empty_table_gets_default_rows(self):
        conn = self.connection()

        self.assertHandles({}, {"seeded": True, "rows": 3})

        self.assertEqual(conn.rows(), DEFAULT_TABLE)

    def test__handles__missing_table_is_created_then_seeded(self):
        conn = self.connection(exists=False)

        self.assertHandles({}, {"seeded": True, "rows": 3})

        self.assertTrue(conn.exists)
        self.assertEqual(len(conn.rows()), 3)

    def test__handles__non_empty_table_is_left_alone(self):
        existing = [(42, "Existing", 1, T1)]
        conn = self.connection(rows=existing)

        self.assertHandles({}, {"seeded": False, "existingRows": 1})

        self.assertEqual(conn.rows(), existing)
        inserts = [s for s, _ in conn.executed if s == compose(INSERT_IF_ABSENT_SQL, self.TABLE_NAME)]
        self.assertEqual(inserts, [])

    def test__handles__seeding_twice_does_not_change_row_count(self):
        conn = self.connection()
        self.assertHandles({}, {"seeded": True, "rows": 3})

        self.use_connections(conn)
        self.assertHandles({}, {"seeded": False, "existingRows": 3})
        self.assertEqual(len(conn.rows()), 3)

    def test__handles__seed_rows_override(self):
        self.set_env_vars(("SEED_ROWS", '[{"item_id":9,"item_name":"X","quantity":1}]'))
        conn = self.connection()

        self.assertHandles({}, {"seeded": True, "rows": 1})

        self.assertEqual(conn.rows(), [(9, "X", 1, FIXED_NOW)])

    def test__handles__malformed_seed_rows_fall_back_to_defaults(self):
        self.set_env_vars(("SEED_ROWS", "[{not json"))
        conn = self.connection()

        self.assertHandles({}, {"seeded": True, "rows": 3})

        self.assertEqual(conn.rows(), DEFAULT_TABLE)

    def test__handles__duplicate_seed_keys_are_skipped(self):
        self.set_env_vars(
            (
                "SEED_ROWS",
                json.dumps(
                    [
                        {"item_id": 1, "item_name": "First", "quantity": 1},
                        {"item_id": 1, "item_name": "Second", "quantity": 2},
                    ]
                ),
            )
        )
        conn = self.connection()

        self.assertHandles({}, {"seeded": True, "rows": 2})

        self.assertEqual(conn.rows(), [(1, "First", 1, FIXED_NOW)])

    def test__handles__connection_closed_once(self):
        conn = self.connection(rows=[(1, "a", 1, T1)])
        self.invoke({})
        self.assertEqual(conn.close_calls, 1)

        conn = self.connection()
        self.invoke({})
        self.assertEqual(conn.close_calls, 1)

    def test__fails__connection_closed_once_on_error(self):
        conn = self.connection()
        conn.fail_on = compose(INSERT_IF_ABSENT_SQL, self.TABLE_NAME)

        self.assertLambdaRaises({}, RuntimeError)

        self.assertEqual(conn.close_calls, 1)

    def test__fails__invalid_identifier_before_connecting(self):
        self.assertLambdaRaises({"table_name": "inventory-sample"}, InvalidIdentifier)
        self.mock_connect.assert_not_called()

    def test__fails__missing_credentials_before_connecting(self):
        self.unset_env_vars("DB_USER")

        self.assertLambdaRaises({}, ConfigurationError)
        self.mock_connect.assert_not_called()


def test__parse_seed_rows__unset_uses_defaults():
    result = parse_seed_rows(None)

    assert result.source == "default"
    assert result.reason is None
    assert result.rows == DEFAULT_SEED_ROWS


def test__parse_seed_rows__valid_override():
    result = parse_seed_rows('[{"item_id":9,"item_name":"X","quantity":1}]')

    assert result.is_override
    assert result.rows == [InventoryRow(item_id=9, item_name="X", quantity=1)]


@pytest.mark.parametrize(
    "raw",
    [
        pytest.param("[{not json", id="malformed json"),
        pytest.param("[]", id="empty list"),
        pytest.param('{"item_id": 1}', id="not a list"),
        pytest.param('[{"item_id": "1", "item_name": "X", "quantity": 1}]', id="string id"),
        pytest.param('[{"item_id": 1, "quantity": 1}]', id="missing name"),
        pytest.param('[{"item_id": 1, "item_name": "X", "quantity": true}]', id="bool quantity"),
        pytest.param('[1, 2, 3]', id="scalars"),
    ],
)
def test__parse_seed_rows__invalid_override_falls_back(raw):
    result = parse_seed_rows(raw)

    assert result.source == "default"
    assert not result.is_override
    assert result.reason
    assert result.rows == DEFAULT_SEED_ROWS
