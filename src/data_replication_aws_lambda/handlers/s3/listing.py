from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from aibs_informatics_aws_utils.s3 import get_s3_client
from aibs_informatics_core.utils.json import JSON
from aibs_informatics_core.utils.os_operations import get_env_var

from data_replication_aws_lambda.common.constants import BUCKET_NAME_ENV_VAR
from data_replication_aws_lambda.common.exceptions import ConfigurationError
from data_replication_aws_lambda.common.handler import LambdaHandler
from data_replication_aws_lambda.common.models import select_model_fields
from data_replication_aws_lambda.handlers.s3.model import (
    ListObjectsRequest,
    ListObjectsResponse,
    S3ObjectSummary,
)

if TYPE_CHECKING:  # pragma: no cover
    from mypy_boto3_s3 import S3Client
else:
    S3Client = object


@dataclass
class ListObjectsHandler(LambdaHandler[ListObjectsRequest, ListObjectsResponse]):
    """Lists the objects of a bucket.

    Only the first ``list_objects_v2`` page is returned; truncated listings are
    not followed.
    """

    s3_client: Optional[S3Client] = None

    @classmethod
    def deserialize_request(cls, request: JSON) -> ListObjectsRequest:
        return ListObjectsRequest.from_dict(select_model_fields(ListObjectsRequest, request))

    @classmethod
    def serialize_response(cls, response: ListObjectsResponse) -> JSON:
        return [obj.to_dict() for obj in response.objects]

    def handle(self, request: ListObjectsRequest) -> ListObjectsResponse:
        bucket = request.bucket or get_env_var(BUCKET_NAME_ENV_VAR)
        if not bucket:
            raise ConfigurationError(f"Bucket environment variable {BUCKET_NAME_ENV_VAR} is not set")

        s3 = self.s3_client or get_s3_client()
        listing = s3.list_objects_v2(Bucket=bucket)
        if listing.get("IsTruncated"):
            self.logger.warning(f"Listing of {bucket} is truncated, returning first page only")

        objects = [S3ObjectSummary.from_listing_entry(e) for e in listing.get("Contents", [])]
        self.logger.info(f"Listed {len(objects)} objects in {bucket}")
        return ListObjectsResponse(objects=objects)


list_objects_handler = ListObjectsHandler.get_handler()
