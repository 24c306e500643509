"""HTTP 服务客户端与工具模块测试"""

from unittest.mock import MagicMock

import pytest
import requests
from loguru import logger
from pydantic import SecretStr

from src.compute import Server, TransportError
from src.service import HttpServiceClient
from src.utils.config import (
    Config,
    DebugConfig,
    ServiceConfig,
    TransportRetryConfig,
    init_config,
    load_config,
    save_config_template,
)
from src.utils.logger import get_logger, setup_logger_from_config
from src.utils.retry import RetryConfig, with_retry


def make_response(status_code: int, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    resp.content = text.encode("utf-8")
    resp.headers = {"Content-Type": "application/json"}
    return resp


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr("src.utils.retry.time.sleep", lambda _: None)


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    config = ServiceConfig(
        base_url="https://compute.example.com/v2/servers/",
        token=SecretStr("abc"),
        accepted_namespaces=["OS-EXT-STS"],
        request_timeout=5,
    )
    return HttpServiceClient(config, TransportRetryConfig(max_retries=2), session=session)


class TestHttpServiceClient:
    """HttpServiceClient 测试"""

    def test_requires_base_url(self):
        """缺少服务地址"""
        with pytest.raises(ValueError):
            HttpServiceClient(ServiceConfig())

    def test_base_url_and_namespaces(self, client):
        """基础地址和命名空间"""
        assert client.base_url() == "https://compute.example.com/v2/servers"
        assert client.accepted_namespaces() == {"OS-EXT-STS"}

    def test_request(self, client, session):
        """请求头、请求体和超时"""
        session.request.return_value = make_response(200, '{"server": {}}')

        response = client.request("https://x/servers/1", method="POST", headers={"X-Trace": "1"}, body="{}")

        assert response.status_code == 200
        assert response.body == '{"server": {}}'
        args, kwargs = session.request.call_args
        assert args == ("POST", "https://x/servers/1")
        assert kwargs["headers"]["Authorization"] == "Bearer abc"
        assert kwargs["headers"]["X-Trace"] == "1"
        assert kwargs["data"] == b"{}"
        assert kwargs["timeout"] == 5

    def test_error_status_is_not_raised(self, client, session):
        """错误状态码不抛异常"""
        session.request.return_value = make_response(500, "boom")
        assert client.request("https://x").status_code == 500

    def test_retries_connection_errors(self, client, session, no_sleep):
        """连接失败后重试"""
        session.request.side_effect = [
            requests.ConnectionError("reset"),
            make_response(200, ""),
        ]
        assert client.request("https://x").status_code == 200
        assert session.request.call_count == 2

    def test_retries_exhausted(self, client, session, no_sleep):
        """重试耗尽后抛出传输错误"""
        session.request.side_effect = requests.Timeout("slow")
        with pytest.raises(TransportError):
            client.request("https://x")
        assert session.request.call_count == 3

    def test_with_resource(self, client, session):
        """与资源句柄配合刷新"""
        session.request.return_value = make_response(
            200, '{"server": {"id": "1", "status": "ACTIVE", "OS-EXT-STS:vm_state": "active"}}'
        )
        server = Server.from_id(client, "1")

        assert server.status == "ACTIVE"
        assert server.get_property("OS-EXT-STS:vm_state") == "active"
        assert session.request.call_args[0][1] == "https://compute.example.com/v2/servers/1"

    def test_from_config(self, session):
        """根据全局配置创建客户端"""
        init_config(Config(
            service=ServiceConfig(base_url="https://db.example.com/v1.0/instances/", accepted_namespaces=["OS-DCF"]),
            retry=TransportRetryConfig(max_retries=0),
        ))
        session.request.side_effect = requests.ConnectionError("reset")

        client = HttpServiceClient.from_config(session=session)

        assert client.base_url() == "https://db.example.com/v1.0/instances"
        assert client.accepted_namespaces() == {"OS-DCF"}
        with pytest.raises(TransportError):
            client.request(client.base_url())
        assert session.request.call_count == 1


class TestRetry:
    """重试装饰器测试"""

    def test_non_retryable_raises_immediately(self, no_sleep):
        """不可重试的异常直接抛出"""
        calls = []

        @with_retry(RetryConfig(max_retries=3))
        def fail():
            calls.append(1)
            raise KeyError("x")

        with pytest.raises(KeyError):
            fail()
        assert len(calls) == 1

    def test_delay_is_capped(self):
        """退避时间有上限"""
        config = RetryConfig(base_delay=1.0, max_delay=5.0)
        assert [config.delay_for(i) for i in range(4)] == [1.0, 2.0, 4.0, 5.0]


class TestConfig:
    """配置加载测试"""

    def test_defaults(self, tmp_path):
        """配置文件不存在时使用默认值"""
        config = load_config(str(tmp_path / "missing.yaml"))
        assert config.polling.interval == 10.0
        assert config.polling.max_timeout == 3600.0

    def test_load_yaml(self, tmp_path):
        """从 YAML 加载"""
        path = tmp_path / "config.yaml"
        path.write_text(
            "service:\n"
            "  base_url: https://compute.example.com/v2/servers\n"
            "  accepted_namespaces: [OS-EXT-STS, OS-DCF]\n"
            "polling:\n"
            "  interval: 2\n",
            encoding="utf-8",
        )
        config = load_config(str(path))

        assert isinstance(config, Config)
        assert config.service.accepted_namespaces == ["OS-EXT-STS", "OS-DCF"]
        assert config.polling.interval == 2.0
        assert config.polling.max_timeout == 3600.0

    def test_save_template(self, tmp_path):
        """模板可以重新加载"""
        path = tmp_path / "config.example.yaml"
        save_config_template(str(path))

        config = load_config(str(path))
        assert config.polling == Config().polling
        assert config.service.base_url == ""


class TestLogger:
    """日志配置测试"""

    def test_file_sink(self, tmp_path):
        """文件日志记录 DEBUG 信息"""
        log_file = tmp_path / "compute.log"
        setup_logger_from_config(DebugConfig(log_level="WARNING", log_file=str(log_file)))

        get_logger("test").debug("刷新 server: https://x/servers/1")
        logger.remove()

        assert "https://x/servers/1" in log_file.read_text(encoding="utf-8")
