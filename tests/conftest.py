"""测试公共夹具"""

from typing import Dict, List, Optional, Set

import pytest

from src.service.base import ServiceClient, ServiceResponse
from src.utils.config import Config, init_config


class FakeService(ServiceClient):
    """记录请求并按顺序返回预置响应的服务"""

    def __init__(
        self,
        base_url: str = "https://compute.example.com/v2/servers/",
        namespaces: Optional[Set[str]] = None,
    ):
        self._base_url = base_url
        self._namespaces = namespaces if namespaces is not None else {"OS-EXT-STS", "vendorX"}
        self.responses: List[object] = []
        self.requests: List[Dict[str, object]] = []

    def queue(self, status_code: int, body: str = ""):
        self.responses.append(ServiceResponse(status_code=status_code, body=body))
        return self

    def base_url(self) -> str:
        return self._base_url

    def request(self, url, method="GET", headers=None, body=""):
        self.requests.append({
            "url": url,
            "method": method,
            "headers": headers,
            "body": body,
        })
        if not self.responses:
            raise AssertionError(f"未预置响应: {method} {url}")
        # 只剩一个响应时重复返回，便于轮询测试
        if len(self.responses) == 1:
            return self.responses[0]
        return self.responses.pop(0)

    def accepted_namespaces(self) -> Set[str]:
        return set(self._namespaces)


@pytest.fixture
def service():
    return FakeService()


@pytest.fixture(autouse=True)
def default_config():
    """每个测试使用独立的默认配置"""
    config = init_config(Config())
    yield config
    init_config(Config())
