import pytest

from wechatpay.config import WeChatPayConfig
from wechatpay.exceptions import ConfigurationError

from conftest import APP_ID, MCH_ID


def test_reads_django_settings():
    config = WeChatPayConfig()

    assert config.mch_id == MCH_ID
    assert config.app_id == APP_ID
    assert config.base_uri == "https://api.mch.weixin.qq.com/"
    assert config.sandbox is False
    assert config.timeout == 30


def test_overrides_take_precedence():
    config = WeChatPayConfig({"mch_id": "42", "sandbox": "true", "debug": "0", "timeout": "5"})

    assert config.mch_id == "42"
    assert config.sandbox is True
    assert config.debug is False
    assert config.timeout == 5.0


def test_missing_merchant_id():
    config = WeChatPayConfig({"mch_id": ""})

    with pytest.raises(ConfigurationError):
        config.mch_id


def test_empty_base_uri_rejected():
    with pytest.raises(ConfigurationError):
        WeChatPayConfig({"base_uri": ""})
