from unittest.mock import MagicMock

import pytest
import requests

from wechatpay.constants import SignVersion
from wechatpay.exceptions import TransportError
from wechatpay.types import SignedRequest
from wechatpay.utils.http_client import HTTPClient


@pytest.fixture()
def signed():
    return SignedRequest(
        method="POST",
        url="pay/orderquery",
        canonical_url="pay/orderquery",
        headers={"Content-Type": "text/xml; charset=utf-8"},
        query={"debug": "1"},
        body="<xml><a>1</a></xml>",
        version=SignVersion.V2,
    )


def test_send_builds_request_from_signed_description(session, signed):
    client = HTTPClient("https://api.mch.weixin.qq.com/", timeout=5, session=session)

    client.send(signed, cert=("cert.pem", "key.pem"), extra_query={"access_token": "tok"})

    session.request.assert_called_once_with(
        "POST",
        "https://api.mch.weixin.qq.com/pay/orderquery",
        params="debug=1&access_token=tok",
        data=b"<xml><a>1</a></xml>",
        headers={"Content-Type": "text/xml; charset=utf-8"},
        timeout=5,
        stream=False,
        cert=("cert.pem", "key.pem"),
    )


def test_absolute_url_used_as_is(session):
    client = HTTPClient("https://api.mch.weixin.qq.com", session=session)
    signed = SignedRequest(
        method="GET",
        url="https://api.mch.weixin.qq.com/v3/billdownload/file?token=abc",
        canonical_url="https://api.mch.weixin.qq.com/v3/billdownload/file?token=abc",
    )

    client.send(signed, stream=True)

    args, kwargs = session.request.call_args
    assert args == ("GET", "https://api.mch.weixin.qq.com/v3/billdownload/file?token=abc")
    assert kwargs["params"] is None
    assert kwargs["data"] is None
    assert kwargs["stream"] is True


def test_connection_errors_become_transport_errors(signed):
    session = MagicMock(spec=requests.Session)
    session.request.side_effect = requests.ConnectionError("connection reset")
    client = HTTPClient("https://api.mch.weixin.qq.com", session=session)

    with pytest.raises(TransportError, match="connection reset"):
        client.send(signed)

    session.request.assert_called_once()


def test_sanitize_headers_and_params():
    client = HTTPClient("https://api.mch.weixin.qq.com", session=MagicMock())

    assert client._sanitize_headers({"Authorization": "WECHATPAY2 x", "Accept": "a"}) == {
        "Authorization": "***",
        "Accept": "a",
    }
    assert client._sanitize_params({"sign": "ABC", "a": "1"}) == {"sign": "***", "a": "1"}


def test_query_is_sent_pre_encoded_in_sorted_order(session):
    client = HTTPClient("https://api.mch.weixin.qq.com", session=session)
    signed = SignedRequest(
        method="GET",
        url="v3/bill/fundflowbill",
        canonical_url="v3/bill/fundflowbill?begin_time=2020-01-01T10%3A00%3A00%2B08%3A00&remark=a%20b",
        query={"remark": "a b", "begin_time": "2020-01-01T10:00:00+08:00"},
    )

    client.send(signed, extra_query={"access_token": "t k"})

    assert session.request.call_args.kwargs["params"] == (
        "begin_time=2020-01-01T10%3A00%3A00%2B08%3A00&remark=a%20b&access_token=t%20k"
    )
