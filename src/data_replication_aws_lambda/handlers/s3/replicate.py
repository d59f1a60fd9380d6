"""Copies newly created S3 objects into a backup bucket."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple
from urllib.parse import quote, unquote_plus

from aibs_informatics_aws_utils.s3 import get_s3_client
from aibs_informatics_core.utils.json import JSON
from aibs_informatics_core.utils.os_operations import get_env_var

from data_replication_aws_lambda.common.constants import (
    DEST_BUCKET_ENV_VAR,
    SOURCE_BUCKET_ENV_VAR,
)
from data_replication_aws_lambda.common.exceptions import ConfigurationError
from data_replication_aws_lambda.common.handler import LambdaHandler
from data_replication_aws_lambda.handlers.s3.model import (
    ReplicateObjectsRequest,
    ReplicateObjectsResponse,
)

if TYPE_CHECKING:  # pragma: no cover
    from mypy_boto3_s3 import S3Client
else:
    S3Client = object


def get_record_key(record: Dict[str, Any]) -> str:
    """Return the decoded object key of an S3 event record, or "" if it has none.

    S3 notifications URL-encode keys with spaces written as "+".
    """
    s3_entity = (record or {}).get("s3") or {}
    raw_key = (s3_entity.get("object") or {}).get("key") or ""
    return unquote_plus(raw_key)


# RFC 3986 marks left unescaped in copy sources, alongside the path separator
COPY_SOURCE_SAFE_CHARS = "/!*'()"


def build_copy_source(bucket: str, key: str) -> str:
    return f"{bucket}/{quote(key, safe=COPY_SOURCE_SAFE_CHARS)}"


@dataclass
class ReplicateObjectsHandler(LambdaHandler[ReplicateObjectsRequest, ReplicateObjectsResponse]):
    """Server-side copies every object in an ObjectCreated batch to the backup bucket.

    Source and destination buckets come from ``SOURCE_BUCKET`` and ``DEST_BUCKET``.
    The destination key is always the source key. A failing copy aborts the rest
    of the batch.
    """

    s3_client: Optional[S3Client] = None

    @classmethod
    def deserialize_request(cls, request: JSON) -> ReplicateObjectsRequest:
        records = request.get("Records") if isinstance(request, dict) else None
        return ReplicateObjectsRequest(records=list(records or []))

    def handle(self, request: ReplicateObjectsRequest) -> ReplicateObjectsResponse:
        source_bucket, dest_bucket = self.resolve_buckets()

        if not request.records:
            self.logger.info("No records to process")
            return ReplicateObjectsResponse(copied=0)

        s3 = self.s3_client or get_s3_client()
        copied = 0
        for record in request.records:
            key = get_record_key(record)
            if not key:
                self.logger.warning(f"Skipping record with no key: {record}")
                continue

            self.logger.info(f"Copying s3://{source_bucket}/{key} to s3://{dest_bucket}/{key}")
            s3.copy_object(
                Bucket=dest_bucket,
                CopySource=build_copy_source(source_bucket, key),
                Key=key,
            )
            copied += 1

        self.logger.info(f"Copied {copied}/{len(request.records)} objects to {dest_bucket}")
        return ReplicateObjectsResponse(copied=copied)

    @classmethod
    def resolve_buckets(cls) -> Tuple[str, str]:
        source_bucket = get_env_var(SOURCE_BUCKET_ENV_VAR)
        dest_bucket = get_env_var(DEST_BUCKET_ENV_VAR)
        if not source_bucket or not dest_bucket:
            raise ConfigurationError(
                f"Bucket environment variables are not set: "
                f"{SOURCE_BUCKET_ENV_VAR}={source_bucket!r}, {DEST_BUCKET_ENV_VAR}={dest_bucket!r}"
            )
        return source_bucket, dest_bucket


replicate_objects_handler = ReplicateObjectsHandler.get_handler()
