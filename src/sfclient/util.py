from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Optional, Tuple, Type, TypeVar, Union

import requests
from pydantic import TypeAdapter, ValidationError

from .exceptions import RequestFailedError, UnexpectedBodyError

T = TypeVar("T")

_logger = logging.getLogger(__name__)

NoneType = type(None)


def is_unit(model: Any) -> bool:
    """True when ``model`` means "no value" (``None`` or ``type(None)``)."""
    return model is None or model is NoneType


@lru_cache(maxsize=256)
def _adapter(model: Any) -> TypeAdapter[Any]:
    return TypeAdapter(NoneType if model is None else model)


def parse_body(text: str, model: Union[Type[T], Any], status_code: Optional[int] = None) -> T:
    """Validate raw JSON ``text`` as ``model``.

    Any failure, whether invalid JSON or a shape that does not match, raises
    UnexpectedBodyError with the unparsed text attached.
    """
    try:
        return _adapter(model).validate_json(text)
    except ValidationError as e:
        _logger.debug("Body did not match %r (status=%s)", model, status_code)
        raise UnexpectedBodyError(text, e, status_code) from e


def send(
    session: requests.Session,
    method: str,
    url: str,
    **kwargs: Any,
) -> Tuple[requests.structures.CaseInsensitiveDict, int, str]:
    """Issue one request and return (headers, status, text). No retries."""
    _logger.debug("%s %s", method, url)
    try:
        r = session.request(method, url, **kwargs)
        text = r.text
    except requests.RequestException as e:
        raise RequestFailedError(f"Request failed {method} {url}: {e}") from e
    _logger.debug("%s %s -> %s", method, url, r.status_code)
    return r.headers, r.status_code, text


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
