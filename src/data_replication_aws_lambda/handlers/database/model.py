from dataclasses import dataclass
from datetime import datetime
from typing import List, Literal, Optional

from aibs_informatics_core.models.base import (
    BooleanField,
    CustomAwareDateTime,
    IntegerField,
    SchemaModel,
    StringField,
    custom_field,
)
from aibs_informatics_core.utils.os_operations import get_env_var

from data_replication_aws_lambda.common.constants import (
    DB_HOST_ENV_VAR_SUFFIX,
    DB_NAME_ENV_VAR_SUFFIX,
    DB_PASSWORD_ENV_VAR,
    DB_PORT_ENV_VAR_SUFFIX,
    DB_USER_ENV_VAR,
    DEFAULT_DB_PORT,
)


@dataclass
class InventoryRow(SchemaModel):
    item_id: int = custom_field(mm_field=IntegerField())
    item_name: str = custom_field(mm_field=StringField())
    quantity: int = custom_field(mm_field=IntegerField())
    # Assigned by the database on insert
    updated_at: Optional[datetime] = custom_field(
        default=None, mm_field=CustomAwareDateTime(allow_none=True)
    )


DEFAULT_SEED_ROWS: List[InventoryRow] = [
    InventoryRow(item_id=1, item_name="Widget Alpha", quantity=25),
    InventoryRow(item_id=2, item_name="Widget Beta", quantity=12),
    InventoryRow(item_id=3, item_name="Widget Gamma", quantity=7),
]


@dataclass
class DatabaseEndpoint(SchemaModel):
    """Connection parameters of one PostgreSQL endpoint."""

    host: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    port: int = custom_field(default=DEFAULT_DB_PORT, mm_field=IntegerField())
    dbname: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    user: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    password: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))

    @classmethod
    def from_env(cls, prefix: str) -> "DatabaseEndpoint":
        """Read ``{prefix}_DB_HOST/PORT/NAME`` plus the shared ``DB_USER``/``DB_PASSWORD``."""
        port = get_env_var(f"{prefix}_{DB_PORT_ENV_VAR_SUFFIX}")
        return cls(
            host=get_env_var(f"{prefix}_{DB_HOST_ENV_VAR_SUFFIX}"),
            port=int(port) if port else DEFAULT_DB_PORT,
            dbname=get_env_var(f"{prefix}_{DB_NAME_ENV_VAR_SUFFIX}"),
            user=get_env_var(DB_USER_ENV_VAR),
            password=get_env_var(DB_PASSWORD_ENV_VAR),
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.user and self.password)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"host={self.host!r}, port={self.port}, dbname={self.dbname!r}, user={self.user!r}"
            ")"
        )


@dataclass
class MirrorTableRequest(SchemaModel):
    table_name: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    # Run the clear-then-repopulate of the target inside a single transaction
    atomic: Optional[bool] = custom_field(default=None, mm_field=BooleanField(allow_none=True))


@dataclass
class MirrorTableResponse(SchemaModel):
    copied_rows: str = custom_field(default="complete", mm_field=StringField(data_key="copiedRows"))


@dataclass
class SeedTableRequest(SchemaModel):
    table_name: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))


@dataclass
class SeedTableResponse(SchemaModel):
    seeded: bool = custom_field(mm_field=BooleanField())
    rows: Optional[int] = custom_field(default=None, mm_field=IntegerField(allow_none=True))
    existing_rows: Optional[int] = custom_field(
        default=None, mm_field=IntegerField(data_key="existingRows", allow_none=True)
    )


SeedRowsSource = Literal["override", "default"]


@dataclass
class SeedRowsResult:
    """Outcome of reading the seed row override.

    ``source`` is "override" when the supplied rows are used as-is, otherwise
    "default" with ``reason`` explaining why the override was not used.
    """

    rows: List[InventoryRow]
    source: SeedRowsSource
    reason: Optional[str] = None

    @property
    def is_override(self) -> bool:
        return self.source == "override"
