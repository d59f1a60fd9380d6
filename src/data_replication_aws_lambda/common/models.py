"""Helpers shared by the request and response models of the handlers."""

import json
from dataclasses import fields
from typing import Any, Dict, Mapping, Type

from aibs_informatics_core.utils.json import JSON

DEFAULT_STATUS_CODE = 200


def build_status_response(body: JSON, status_code: int = DEFAULT_STATUS_CODE) -> Dict[str, Any]:
    """Wrap a serialized response in the ``{statusCode, body}`` invocation result.

    Args:
        body (JSON): Serialized response. Encoded to a JSON string.
        status_code (int): Status code reported to the caller. Defaults to 200.

    Returns:
        ``{"statusCode": status_code, "body": json.dumps(body)}``
    """
    return {"statusCode": status_code, "body": json.dumps(body)}


def select_model_fields(model_cls: Type, event: Any) -> Dict[str, Any]:
    """Keep only the keys of ``event`` that name a field of the ``model_cls`` dataclass.

    Scheduled and storage notification events carry envelope keys (``id``,
    ``detail-type``, ``time``, ...) that are not part of any request model.
    Non-mapping events select nothing.
    """
    if not isinstance(event, Mapping):
        return {}
    names = {f.name for f in fields(model_cls)}
    return {k: v for k, v in event.items() if k in names}
