"""Environment variable names and defaults shared by the replication handlers."""

SERVICE_NAME = "data-replication"

# Object storage
SOURCE_BUCKET_ENV_VAR = "SOURCE_BUCKET"
DEST_BUCKET_ENV_VAR = "DEST_BUCKET"
BUCKET_NAME_ENV_VAR = "BUCKET_NAME"

# Database
TABLE_NAME_ENV_VAR = "TABLE_NAME"
DEFAULT_TABLE_NAME = "inventory_sample"

DB_USER_ENV_VAR = "DB_USER"
DB_PASSWORD_ENV_VAR = "DB_PASSWORD"

SOURCE_DB_PREFIX = "SOURCE"
TARGET_DB_PREFIX = "TARGET"
DB_HOST_ENV_VAR_SUFFIX = "DB_HOST"
DB_PORT_ENV_VAR_SUFFIX = "DB_PORT"
DB_NAME_ENV_VAR_SUFFIX = "DB_NAME"
DEFAULT_DB_PORT = 5432

MIRROR_ATOMIC_ENV_VAR = "MIRROR_ATOMIC"
SEED_ROWS_ENV_VAR = "SEED_ROWS"
