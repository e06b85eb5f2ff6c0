"""
Pytest 配置文件 (conftest.py)

主要功能：
1. 测试环境变量与日志初始化（必须在导入内部模块之前）
2. RSA 测试密钥（session 级别生成一次）
3. 支付宝网关的内存替身 (httpx.MockTransport)
4. 自动为异步测试添加 asyncio marker
"""

import inspect
import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any
from urllib.parse import parse_qsl

import httpx
import pytest
import pytest_asyncio

# ==========================================
# 1. 路径与环境配置
# ==========================================

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ["APP_ENV"] = "test"
os.environ["LOG_TO_FILE"] = "false"

from pkg.crypto import generate_rsa_key_pair  # noqa: E402
from pkg.logger import init_logger  # noqa: E402
from pkg.signature import RSASignatureHandler  # noqa: E402
from pkg.third_party_auth import AlipayAuthStrategy, AlipayConfig  # noqa: E402
from pkg.toolkit.http_cli import AsyncHttpClient  # noqa: E402
from pkg.toolkit.json import orjson_dumps  # noqa: E402

init_logger(level="DEBUG", write_to_file=False, enqueue=False)

TOKEN_METHOD = "alipay.system.oauth.token"
USER_INFO_METHOD = "alipay.user.info.share"


# ==========================================
# 2. pytest 配置 hooks
# ==========================================


def pytest_configure(config: pytest.Config):
    config.addinivalue_line("markers", "unit: 单元测试，不依赖外部服务")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]):
    """为所有 async 测试函数自动添加 asyncio marker"""
    for item in items:
        if isinstance(item, pytest.Function) and inspect.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)


@pytest.fixture
def anyio_backend():
    """配置 anyio 后端为 asyncio"""
    return "asyncio"


# ==========================================
# 3. 密钥 Fixtures
# ==========================================


@pytest.fixture(scope="session")
def app_key_pair() -> tuple[str, str]:
    """应用密钥对 (私钥 PEM, 公钥 PEM)"""
    return generate_rsa_key_pair()


@pytest.fixture(scope="session")
def alipay_key_pair() -> tuple[str, str]:
    """模拟支付宝平台密钥对 (私钥 PEM, 公钥 PEM)"""
    return generate_rsa_key_pair()


@pytest.fixture
def alipay_config(app_key_pair, alipay_key_pair) -> AlipayConfig:
    return AlipayConfig(
        app_id="2021000000000001",
        app_private_key=app_key_pair[0],
        alipay_public_key=alipay_key_pair[1],
    )


# ==========================================
# 4. 支付宝网关替身
# ==========================================


class FakeAlipayGateway:
    """
    基于 httpx.MockTransport 的支付宝网关替身

    - responses: method -> 响应对象 (dict 会被包装为 <method>_response)、httpx.Response 或可调用对象
    - calls: 收到的表单参数列表
    - 响应体按 GBK 编码返回
    """

    def __init__(self, app_public_key: str):
        self.responses: dict[str, Any] = {}
        self.calls: list[dict[str, str]] = []
        self.verifier = RSASignatureHandler(public_key=app_public_key)

    def calls_for(self, method: str) -> list[dict[str, str]]:
        return [c for c in self.calls if c.get("method") == method]

    def set_success(self, method: str, payload: dict[str, Any]) -> None:
        self.responses[method] = {method.replace(".", "_") + "_response": payload}

    def set_error(self, method: str, error: dict[str, Any]) -> None:
        self.responses[method] = {"error_response": error}

    def handler(self, request: httpx.Request) -> httpx.Response:
        params = dict(parse_qsl(request.content.decode("utf-8"), keep_blank_values=True))
        self.calls.append(params)

        response = self.responses.get(params.get("method", ""))
        if response is None:
            return httpx.Response(404, text="unknown method")
        if callable(response):
            response = response(params)
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, content=orjson_dumps(response).encode("gbk"))

    def signature_valid(self, params: dict[str, str]) -> bool:
        return self.verifier.verify_signature(params, params["sign"])


@pytest.fixture
def gateway(app_key_pair) -> FakeAlipayGateway:
    return FakeAlipayGateway(app_public_key=app_key_pair[1])


@pytest_asyncio.fixture
async def alipay_strategy(alipay_config, gateway) -> AsyncGenerator[AlipayAuthStrategy, None]:
    http_client = AsyncHttpClient(
        timeout=alipay_config.timeout,
        headers={"Accept": "application/json"},
        transport=httpx.MockTransport(gateway.handler),
    )
    strategy = AlipayAuthStrategy(alipay_config, http_client=http_client)
    yield strategy
    await strategy.close()


@pytest.fixture
def token_payload() -> dict[str, Any]:
    return {
        "access_token": "tok1",
        "refresh_token": "ref1",
        "user_id": "2088xxx",
        "expires_in": 1296000,
        "re_expires_in": 2592000,
        "auth_start": "2024-12-23 18:30:00",
    }


@pytest.fixture
def user_info_payload() -> dict[str, Any]:
    return {
        "code": "10000",
        "msg": "Success",
        "user_id": "2088xxx",
        "nick_name": "支付宝用户",
        "avatar": "https://tfs.alipayobjects.com/images/partner/T1.png",
        "gender": "F",
        "province": "浙江省",
        "city": "杭州市",
    }


# ==========================================
# 5. Clean Up
# ==========================================


@pytest.fixture(autouse=True)
def cleanup_after_test():
    """每个测试后重置配置单例"""
    yield

    from internal.config import reset_settings

    reset_settings()
