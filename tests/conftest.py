import io
import sys
from pathlib import Path
from unittest.mock import MagicMock

import django
import pytest
import requests
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from django.conf import settings

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

MCH_ID = "1900000109"
APP_ID = "wxd678efh567hg6787"
SERIAL_NO = "5157F09EFDC096DE15EBE81A47057A7232F1B8E1"
API_V2_KEY = "192006250b4c09247ec02edce69f6a2d"
SANDBOX_KEY = "0123456789abcdef0123456789abcdef"

if not settings.configured:
    settings.configure(
        INSTALLED_APPS=["wechatpay"],
        WECHATPAY_BASE_URI="https://api.mch.weixin.qq.com/",
        WECHATPAY_MCH_ID=MCH_ID,
        WECHATPAY_APP_ID=APP_ID,
        WECHATPAY_SERIAL_NO=SERIAL_NO,
        WECHATPAY_API_V2_KEY=API_V2_KEY,
    )
    django.setup()

from wechatpay.config import WeChatPayConfig  # noqa: E402
from wechatpay.credentials import SettingsCredentialProvider  # noqa: E402
from wechatpay.services.base_client import BaseClient  # noqa: E402
from wechatpay.utils.http_client import HTTPClient  # noqa: E402


def make_response(status_code=200, content=b"", raw=None, headers=None):
    """Build a requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.headers.update(headers or {})
    response.url = "https://api.mch.weixin.qq.com/"
    response.raw = raw if raw is not None else io.BytesIO(content)
    if raw is None:
        response._content = content
    return response


def stream_response(data: bytes, status_code=200):
    return make_response(status_code=status_code, raw=io.BytesIO(data))


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key) -> str:
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")


@pytest.fixture()
def make_config(private_key_pem):
    def _make(**overrides) -> WeChatPayConfig:
        values = {"private_key": private_key_pem}
        values.update(overrides)
        return WeChatPayConfig(values)

    return _make


@pytest.fixture()
def config(make_config) -> WeChatPayConfig:
    return make_config()


@pytest.fixture()
def credentials(config) -> SettingsCredentialProvider:
    return SettingsCredentialProvider(config)


@pytest.fixture()
def session():
    mock_session = MagicMock(spec=requests.Session)
    mock_session.request.return_value = make_response(content=b"{}")
    return mock_session


@pytest.fixture()
def make_client(make_config, session):
    def _make(**overrides) -> BaseClient:
        cfg = make_config(**overrides)
        http_client = HTTPClient(cfg.base_uri, timeout=cfg.timeout, session=session)
        return BaseClient(config=cfg, http_client=http_client)

    return _make
