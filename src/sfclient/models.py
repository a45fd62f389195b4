"""Typed shapes for Salesforce REST payloads."""

from __future__ import annotations

from dataclasses import dataclass, is_dataclass
from datetime import datetime
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator
from pydantic_core import to_jsonable_python

T = TypeVar("T")


@dataclass
class SfResponse(Generic[T]):
    """Headers, status and (optionally) parsed body of a single round trip."""

    headers: Mapping[str, str]
    status_code: int
    body: Optional[T] = None

    def __str__(self) -> str:
        return f"Received response with {self.status_code} status"


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ----------------------------------------------------------------------
# Authentication
# ----------------------------------------------------------------------
class AccessToken(_Model):
    access_token: str
    scope: str
    instance_url: str
    id: str
    token_type: str


class LoginError(_Model):
    error: str
    error_description: str


class UserInfo(_Model):
    """OpenID Connect userinfo payload."""

    sub: str
    user_id: str
    organization_id: str
    preferred_username: str
    nickname: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    email_verified: bool = False
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    zoneinfo: Optional[str] = None
    profile: Optional[str] = None
    picture: Optional[str] = None
    phone_number: Optional[str] = None
    phone_number_verified: bool = False
    is_salesforce_integration_user: bool = False
    active: bool = True
    user_type: Optional[str] = None
    language: Optional[str] = None
    locale: Optional[str] = None
    utc_offset: Optional[int] = Field(default=None, alias="utcOffset")
    updated_at: Optional[datetime] = None


# ----------------------------------------------------------------------
# sObject API
# ----------------------------------------------------------------------
class ApiError(_Model):
    error_code: str = Field(alias="errorCode")
    message: str


class ObjectDescription(_Model):
    name: str
    label: str


class ObjectDescriptionsResponse(_Model):
    encoding: str
    max_batch_size: int = Field(alias="maxBatchSize")
    sobjects: List[ObjectDescription]


class ObjectDescriptionResponse(_Model):
    object_describe: ObjectDescription = Field(alias="objectDescribe")


class CreateObjectResponse(_Model):
    id: Optional[str] = None
    errors: List[ApiError] = Field(default_factory=list)
    success: bool


class QueryRecordAttributes(_Model):
    type: str
    url: str


class QueryRecord(_Model, Generic[T]):
    """A query row: ``attributes`` metadata plus the record fields as ``T``.

    Salesforce returns the fields alongside ``attributes`` in one flat object;
    everything except ``attributes`` is validated as ``record``.
    """

    attributes: QueryRecordAttributes
    record: T

    @model_validator(mode="before")
    @classmethod
    def split_attributes(cls, data: Any) -> Any:
        if isinstance(data, dict) and set(data) != {"attributes", "record"}:
            fields = dict(data)
            attributes = fields.pop("attributes", None)
            return {"attributes": attributes, "record": fields}
        return data

    @model_serializer(mode="wrap")
    def flatten_record(self, handler: Any) -> Dict[str, Any]:
        data = handler(self)
        fields = data.pop("record", None)
        if isinstance(fields, dict):
            data.update(fields)
        return data


class QueryResponse(_Model, Generic[T]):
    total_size: int = Field(alias="totalSize")
    done: bool
    # Absent on the last page.
    next_records_url: Optional[str] = Field(default=None, alias="nextRecordsUrl")
    records: List[QueryRecord[T]]


@dataclass(frozen=True)
class ExternalId:
    """Identifies a record by an external-id field instead of its Id."""

    field: str
    value: str


def dump_record(record: Any) -> Dict[str, Any]:
    """Turn a caller-supplied record into a JSON-ready dict.

    Dates, datetimes and Decimals become their JSON forms for all three record
    kinds (pydantic models, dataclasses and mappings).
    """
    if isinstance(record, BaseModel):
        return record.model_dump(by_alias=True, mode="json")
    if not is_dataclass(record):
        record = dict(record)
    return to_jsonable_python(record)
