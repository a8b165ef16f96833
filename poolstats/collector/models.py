"""Pydantic models for the consumed subset of the distributedtask API.

Only the fields the collectors read are declared.  Unknown fields are
allowed, and a job request keeps its raw payload for the log file dump.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from poolstats.common.errors import RecordDecodeError


class ApiRecord(BaseModel):
    """Base for API records: camelCase aliases, unknown fields retained."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def has_field(self, name: str) -> bool:
        """True when *name* was present in the payload, even as ``null``."""
        return name in self.model_fields_set


class AgentRecord(ApiRecord):
    """One entry of ``GET pools/{id}/agents``."""

    name: str | None = None
    enabled: bool = False
    status: str | None = None
    assigned_request: Any = None

    @property
    def is_active(self) -> bool:
        return self.has_field("assigned_request")

    @property
    def is_online(self) -> bool:
        return self.status == "online"


class IdentityRef(ApiRecord):
    name: str | None = None


class JobRequest(ApiRecord):
    """One entry of ``GET pools/{id}/jobrequests``.

    Timestamps stay as the raw strings the API sent; parsing happens in the
    build collector so a bad value is a logged data-quality issue rather
    than a rejected payload.
    """

    request_id: int | None = None
    queue_time: str | None = None
    assign_time: str | None = None
    result: str | None = None
    owner: IdentityRef | None = None

    _raw: dict[str, Any] = PrivateAttr(default_factory=dict)

    @model_validator(mode="wrap")
    @classmethod
    def _keep_raw(cls, data: Any, handler: Any) -> JobRequest:
        record = handler(data)
        if isinstance(data, dict):
            record._raw = data
        return record

    @property
    def is_assigned(self) -> bool:
        return self.has_field("assign_time")

    @property
    def has_result(self) -> bool:
        return self.has_field("result")

    @property
    def owner_name(self) -> str:
        if self.owner is None or self.owner.name is None:
            return ""
        return self.owner.name

    def dump(self) -> str:
        """The full record as JSON, using the API's field names."""
        return json.dumps(self._raw)


class AgentList(BaseModel):
    count: int | None = None
    value: list[AgentRecord] = Field(default_factory=list)


class JobRequestList(BaseModel):
    count: int | None = None
    value: list[JobRequest] = Field(default_factory=list)


def decode(model: type[BaseModel], body: bytes) -> Any:
    """Validate *body* against *model* or raise :class:`RecordDecodeError`."""
    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        raise RecordDecodeError(
            f"Response is not a valid {model.__name__}",
            details={"errors": exc.error_count(), "bytes": len(body)},
            cause=exc,
        ) from exc
