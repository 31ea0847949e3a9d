import hashlib
import hmac
from unittest.mock import MagicMock

import pytest

from wechatpay.exceptions import KeyResolutionError, SigningError
from wechatpay.signing.legacy import (
    LegacyRequestSigner,
    build_sign_string,
    generate_sign,
    verify_sign,
)
from wechatpay.utils.xml_codec import xml_to_dict

KEY = "192006250b4c09247ec02edce69f6a2d"

DOC_PARAMS = {
    "appid": "wxd930ea5d5a258f4f",
    "mch_id": "10000100",
    "device_info": "1000",
    "body": "test",
    "nonce_str": "ibuaiVcKdpRxkhJA",
}


def test_md5_sign_matches_gateway_example():
    assert generate_sign(DOC_PARAMS, KEY) == "9A0A8659F005D6984697E2CA0A9CF3B7"


def test_sign_string_is_sorted_with_key_appended():
    assert build_sign_string(DOC_PARAMS, KEY) == (
        "appid=wxd930ea5d5a258f4f&body=test&device_info=1000"
        "&mch_id=10000100&nonce_str=ibuaiVcKdpRxkhJA&key=" + KEY
    )


def test_sign_ignores_existing_sign_and_empty_values():
    params = dict(DOC_PARAMS, sign="WHATEVER", attach="", detail=None)

    assert generate_sign(params, KEY) == generate_sign(DOC_PARAMS, KEY)


def test_hmac_sha256_sign():
    expected = hmac.new(
        KEY.encode("utf-8"),
        build_sign_string(DOC_PARAMS, KEY).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest().upper()

    signature = generate_sign(DOC_PARAMS, KEY, "HMAC-SHA256")

    assert signature == expected
    assert signature != generate_sign(DOC_PARAMS, KEY)


def test_sign_is_pure_and_sensitive_to_every_value():
    baseline = generate_sign(DOC_PARAMS, KEY)

    assert generate_sign(dict(DOC_PARAMS), KEY) == baseline
    for name in DOC_PARAMS:
        changed = dict(DOC_PARAMS, **{name: DOC_PARAMS[name] + "x"})
        assert generate_sign(changed, KEY) != baseline
    assert generate_sign(DOC_PARAMS, KEY[::-1]) != baseline


def test_unsupported_sign_type():
    with pytest.raises(SigningError):
        generate_sign(DOC_PARAMS, KEY, "SHA1")


def test_verify_sign():
    params = dict(DOC_PARAMS, sign="9a0a8659f005d6984697e2ca0a9cf3b7")

    assert verify_sign(params, KEY)
    assert not verify_sign(dict(params, body="other"), KEY)
    assert not verify_sign(DOC_PARAMS, KEY)


@pytest.fixture()
def key_provider():
    provider = MagicMock()
    provider.get_secret_key_for.return_value = KEY
    return provider


def test_post_request_injects_nonce_and_sends_signed_xml(key_provider):
    signer = LegacyRequestSigner(key_provider)

    signed = signer.sign(
        "pay/orderquery",
        "post",
        params={"appid": "wx1", "mch_id": "100", "out_trade_no": "T1", "attach": ""},
    )

    key_provider.get_secret_key_for.assert_called_once_with("pay/orderquery")
    sent = xml_to_dict(signed.body)
    assert len(sent["nonce_str"]) == 32
    assert "attach" not in sent
    assert verify_sign(sent, KEY)
    assert signed.method == "POST"
    assert signed.url == "pay/orderquery"
    assert signed.headers["Content-Type"].startswith("text/xml")
    assert signed.query is None


def test_fresh_nonce_overrides_caller_nonce(key_provider):
    signer = LegacyRequestSigner(key_provider)

    first = xml_to_dict(signer.sign("pay/orderquery", "POST", params={"nonce_str": "fixed"}).body)
    second = xml_to_dict(signer.sign("pay/orderquery", "POST", params={"nonce_str": "fixed"}).body)

    assert first["nonce_str"] != "fixed"
    assert first["nonce_str"] != second["nonce_str"]


def test_hmac_sign_type_from_params(key_provider):
    signer = LegacyRequestSigner(key_provider)

    sent = xml_to_dict(signer.sign("pay/orderquery", "POST", params={"sign_type": "HMAC-SHA256"}).body)

    assert sent["sign"] == generate_sign(sent, KEY, "HMAC-SHA256")
    assert verify_sign(sent, KEY)


def test_get_request_has_no_body(key_provider):
    signer = LegacyRequestSigner(key_provider)

    signed = signer.sign("pay/downloadbill", "GET", params={"bill_date": "20140603"},
                         options={"query": {"tar_type": "GZIP", "empty": ""}})

    assert signed.body is None
    assert signed.query["bill_date"] == "20140603"
    assert signed.query["tar_type"] == "GZIP"
    assert "empty" not in signed.query
    assert verify_sign({k: v for k, v in signed.query.items() if k != "tar_type"}, KEY)


def test_debug_adds_query_flag(key_provider):
    signed = LegacyRequestSigner(key_provider, debug=True).sign("pay/orderquery", "POST", params={"a": "1"})

    assert signed.query == {"debug": "1"}


def test_key_resolution_failure_aborts(key_provider):
    key_provider.get_secret_key_for.side_effect = KeyResolutionError("no key")

    with pytest.raises(KeyResolutionError):
        LegacyRequestSigner(key_provider).sign("pay/orderquery", "POST", params={"a": "1"})


def test_caller_headers_are_kept(key_provider):
    signed = LegacyRequestSigner(key_provider).sign(
        "pay/orderquery", "POST", params={"a": "1"}, options={"headers": {"User-Agent": "shop/1.0"}}
    )

    assert signed.headers["User-Agent"] == "shop/1.0"


def test_transport_query_cannot_override_signed_fields(key_provider):
    signed = LegacyRequestSigner(key_provider).sign(
        "pay/orderquery", "GET", params={"out_trade_no": "T1"},
        options={"query": {"out_trade_no": "T2", "nonce_str": "forged", "sign": "FORGED", "tar_type": "GZIP"}},
    )

    assert signed.query["out_trade_no"] == "T1"
    assert signed.query["nonce_str"] != "forged"
    assert signed.query["tar_type"] == "GZIP"
    assert verify_sign({k: v for k, v in signed.query.items() if k != "tar_type"}, KEY)
