from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest
import requests

from sfclient.exceptions import RequestFailedError, UnexpectedBodyError
from sfclient.models import ApiError
from sfclient.util import bearer, is_unit, parse_body, send


def test_is_unit():
    assert is_unit(None)
    assert is_unit(type(None))
    assert not is_unit(str)
    assert not is_unit(Dict[str, Any])


def test_parse_body_success_and_error_lists_share_one_helper():
    assert parse_body('{"a": 1}', Dict[str, int]) == {"a": 1}
    errors = parse_body('[{"errorCode": "X", "message": "m"}]', List[ApiError])
    assert errors == [ApiError(error_code="X", message="m")]


@pytest.mark.parametrize("text", ['{"a": "not-an-int"}', "not json", ""])
def test_parse_body_keeps_raw_text(text):
    with pytest.raises(UnexpectedBodyError) as exc_info:
        parse_body(text, Dict[str, int], 200)

    assert exc_info.value.body == text
    assert exc_info.value.status_code == 200
    assert exc_info.value.error is not None


def test_parse_body_unit():
    assert parse_body("null", None) is None
    with pytest.raises(UnexpectedBodyError):
        parse_body('{"id": "1"}', None)


def test_send_returns_headers_status_text():
    session = MagicMock()
    session.request.return_value = MagicMock(status_code=200, text="{}", headers={"X": "1"})

    headers, status, text = send(session, "GET", "https://x/y", headers=bearer("t"))

    assert (headers, status, text) == ({"X": "1"}, 200, "{}")
    session.request.assert_called_once_with(
        "GET", "https://x/y", headers={"Authorization": "Bearer t"}
    )


def test_send_wraps_transport_errors():
    session = MagicMock()
    session.request.side_effect = requests.Timeout("slow")

    with pytest.raises(RequestFailedError, match="slow"):
        send(session, "GET", "https://x/y")
