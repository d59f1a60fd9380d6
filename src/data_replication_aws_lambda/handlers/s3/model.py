from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from aibs_informatics_core.models.base import (
    CustomAwareDateTime,
    DictField,
    IntegerField,
    ListField,
    SchemaModel,
    StringField,
    custom_field,
)


@dataclass
class ReplicateObjectsRequest(SchemaModel):
    # Raw "Records" entries of an S3 ObjectCreated notification
    records: List[Dict[str, Any]] = custom_field(
        default_factory=list, mm_field=ListField(DictField())
    )


@dataclass
class ReplicateObjectsResponse(SchemaModel):
    copied: int = custom_field(mm_field=IntegerField())


@dataclass
class ListObjectsRequest(SchemaModel):
    bucket: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))


@dataclass
class S3ObjectSummary(SchemaModel):
    key: str = custom_field(mm_field=StringField(data_key="Key"))
    size: int = custom_field(default=0, mm_field=IntegerField(data_key="Size"))
    last_modified: Optional[datetime] = custom_field(
        default=None, mm_field=CustomAwareDateTime(data_key="LastModified", allow_none=True)
    )
    etag: Optional[str] = custom_field(
        default=None, mm_field=StringField(data_key="ETag", allow_none=True)
    )
    storage_class: Optional[str] = custom_field(
        default=None, mm_field=StringField(data_key="StorageClass", allow_none=True)
    )

    @classmethod
    def from_listing_entry(cls, entry: Dict[str, Any]) -> "S3ObjectSummary":
        return cls(
            key=entry["Key"],
            size=entry.get("Size", 0),
            last_modified=entry.get("LastModified"),
            etag=entry.get("ETag"),
            storage_class=entry.get("StorageClass"),
        )


@dataclass
class ListObjectsResponse(SchemaModel):
    objects: List[S3ObjectSummary] = custom_field(
        default_factory=list, mm_field=ListField(S3ObjectSummary.as_mm_field())
    )
