from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type, TypeVar
from urllib.parse import quote

import requests

from .authenticator import Authenticator
from .config import SFConfig, build_authenticator
from .exceptions import ApiFailureError
from .models import (
    ApiError,
    CreateObjectResponse,
    ExternalId,
    ObjectDescriptionResponse,
    ObjectDescriptionsResponse,
    QueryRecord,
    QueryResponse,
    SfResponse,
    dump_record,
)
from .util import bearer, is_unit, parse_body, send

T = TypeVar("T")

_logger = logging.getLogger(__name__)

_ERRORS = List[ApiError]
_PATCH_OK = (200, 201, 204)


# ----------------------------------------------------------------------
# Main API client
# ----------------------------------------------------------------------
class SalesforceClient:
    """Salesforce sObject REST client bound to one access token.

    The token is acquired once, when the client is built. There is no refresh:
    build a new client to re-authenticate.
    """

    def __init__(
        self,
        version: str,
        authenticator: Authenticator,
        session: Optional[requests.Session] = None,
    ) -> None:
        token = authenticator.get_token()
        self.session = session or requests.Session()
        self._instance_url = token.instance_url.rstrip("/")
        self._version = version.lstrip("vV")
        self._bearer = token.access_token
        _logger.info(
            "Connected to Salesforce instance=%s api=v%s", self._instance_url, self._version
        )

    @classmethod
    def from_config(
        cls, cfg: Optional[SFConfig] = None, session: Optional[requests.Session] = None
    ) -> SalesforceClient:
        """Pick the authenticator ``cfg`` describes and connect."""
        cfg = cfg or SFConfig.from_env()
        return cls(cfg.api_version, build_authenticator(cfg, session), session)

    @property
    def instance_url(self) -> str:
        return self._instance_url

    @property
    def version(self) -> str:
        return self._version

    @property
    def access_token(self) -> str:
        return self._bearer

    def url(self, path: str) -> str:
        return f"{self._instance_url}/services/data/v{self._version}/sobjects/{path}"

    # --------------------------- Public methods -----------------------

    def describe_objects(self) -> SfResponse[ObjectDescriptionsResponse]:
        """Global describe: every sObject visible to the user."""
        return self._get("", ObjectDescriptionsResponse)

    def describe_object(self, name: str) -> SfResponse[ObjectDescriptionResponse]:
        return self._get(name, ObjectDescriptionResponse)

    def create_object(self, name: str, record: Any) -> SfResponse[CreateObjectResponse]:
        return self._post(name, record)

    def get_object(self, name: str, id: str, model: Type[T] = Dict[str, Any]) -> SfResponse[T]:
        """Fetch one record and validate it as ``model``."""
        return self._get(f"{name}/{id}", model)

    def query(self, soql: str, model: Type[T] = Dict[str, Any]) -> SfResponse[QueryResponse[T]]:
        """Run a SOQL query; each record's fields are validated as ``model``."""
        return self._get(f"query/?q={quote(soql, safe='')}", QueryResponse[model])

    def query_more(
        self, next_records_url: str, model: Type[T] = Dict[str, Any]
    ) -> SfResponse[QueryResponse[T]]:
        """Fetch the page a previous QueryResponse pointed to."""
        url = f"{self._instance_url}{next_records_url}"
        return self._classify("GET", url, (200,), QueryResponse[model])

    def query_all_iter(
        self, soql: str, model: Type[T] = Dict[str, Any]
    ) -> Iterator[QueryRecord[T]]:
        """Yield records across pages via nextRecordsUrl."""
        page = self.query(soql, model).body
        while page is not None:
            yield from page.records
            if page.done or not page.next_records_url:
                return
            page = self.query_more(page.next_records_url, model).body

    def update_object(
        self, name: str, id: str, record: Any, model: Any = None
    ) -> SfResponse[Any]:
        """PATCH a record. With ``model=None`` an empty reply yields no body."""
        return self._patch(f"{name}/{id}", record, model)

    def upsert_object(
        self, name: str, external_id: ExternalId, record: Any
    ) -> SfResponse[CreateObjectResponse]:
        path = f"{name}/{external_id.field}/{external_id.value}"
        return self._patch(path, record, CreateObjectResponse)

    def delete_object(self, name: str, id: str) -> SfResponse[None]:
        return self._classify("DELETE", self.url(f"{name}/{id}"), (204,), None)

    # --------------------------- HTTP wrappers -----------------------

    def _get(self, path: str, model: Any) -> SfResponse[Any]:
        return self._classify("GET", self.url(path), (200,), model)

    def _post(self, path: str, record: Any) -> SfResponse[CreateObjectResponse]:
        return self._classify(
            "POST", self.url(path), (201,), CreateObjectResponse, json=dump_record(record)
        )

    def _patch(self, path: str, record: Any, model: Any) -> SfResponse[Any]:
        return self._classify("PATCH", self.url(path), _PATCH_OK, model, json=dump_record(record))

    def _classify(
        self,
        method: str,
        url: str,
        expected: Tuple[int, ...],
        model: Any,
        **kwargs: Any,
    ) -> SfResponse[Any]:
        """One round trip; expected status -> typed body, anything else -> ApiFailureError."""
        headers, status, text = send(
            self.session, method, url, headers=bearer(self._bearer), **kwargs
        )

        if status not in expected:
            _logger.warning("HTTP %s from %s %s", status, method, url)
            errors = parse_body(text, _ERRORS, status)
            raise ApiFailureError(SfResponse(headers=headers, status_code=status, body=errors))

        if is_unit(model) and text == "":
            body = None
        else:
            body = parse_body(text, model, status)
        return SfResponse(headers=headers, status_code=status, body=body)
