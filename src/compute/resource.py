"""计算类资源基类

虚拟机、数据库实例等可轮询状态的远程资源共用的句柄实现。
"""

import json
import threading
import time
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from loguru import logger

from .errors import (
    ActionError,
    DocumentError,
    ExtensionAttributeError,
    InvalidArgumentError,
    ResourceDecodeError,
    ResourceIdRequiredError,
    ResourceNotFoundError,
    ResourceUrlError,
    TransportError,
    UnknownError,
)
from .kinds import ResourceKind
from .status import ResourceStatus
from ..service.base import ServiceClient, ServiceResponse
from ..utils.config import get_config


# 以普通属性保存的核心字段，其余领域字段保存在 _fields 中
_CORE_FIELDS = ("id", "status", "links")


class ComputeResource:
    """计算类资源句柄

    功能：
    - 解析资源 URL（self 链接优先，其次 集合地址/ID）
    - 从服务端刷新状态（合并而非重置）
    - 轮询等待资源进入目标状态
    - 向 /action 子资源发送动作请求
    - 按命名空间校验扩展属性
    """

    kind: Optional[ResourceKind] = None

    def __init__(
        self,
        service: ServiceClient,
        info: Any = None,
        kind: Optional[ResourceKind] = None,
    ):
        """初始化资源句柄

        Args:
            service: 所属服务客户端
            info: None 创建空句柄；字符串视为资源 ID 并立即刷新；
                映射的每一项直接复制到句柄上，不发请求
            kind: 资源类型，未提供时使用类属性 kind
        """
        object.__setattr__(self, "service", service)
        object.__setattr__(self, "_extensions", {})
        object.__setattr__(self, "_fields", {})
        if kind is not None:
            object.__setattr__(self, "kind", kind)

        self.id: Optional[str] = None
        self.status: Optional[str] = None
        self.links: List[Dict[str, str]] = []

        if info is None:
            return
        if isinstance(info, str):
            self.refresh(info)
        elif isinstance(info, Mapping):
            self._copy_fields(info)
        else:
            raise InvalidArgumentError(f"不支持的资源参数类型: {type(info).__name__}")

    @classmethod
    def empty(cls, service: ServiceClient, kind: Optional[ResourceKind] = None) -> "ComputeResource":
        """创建空句柄"""
        return cls(service, kind=kind)

    @classmethod
    def from_id(
        cls,
        service: ServiceClient,
        resource_id: str,
        kind: Optional[ResourceKind] = None,
    ) -> "ComputeResource":
        """按 ID 创建并立即刷新"""
        if not isinstance(resource_id, str):
            raise InvalidArgumentError(f"资源 ID 必须是字符串: {type(resource_id).__name__}")
        return cls(service, resource_id, kind=kind)

    @classmethod
    def from_fields(
        cls,
        service: ServiceClient,
        fields: Mapping[str, Any],
        kind: Optional[ResourceKind] = None,
    ) -> "ComputeResource":
        """从已解码的字段创建，不发请求"""
        if not isinstance(fields, Mapping):
            raise InvalidArgumentError(f"资源字段必须是映射: {type(fields).__name__}")
        return cls(service, fields, kind=kind)

    # ---------- 属性 ----------

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or name in _CORE_FIELDS:
            object.__setattr__(self, name, value)
        elif name in self._fields or (self.kind is not None and name in self.kind.fields):
            self._fields[name] = value
        else:
            self.set_property(name, value)

    def __getattr__(self, name: str) -> Any:
        # 仅在常规属性查找失败时调用，与方法同名的字段只能通过 get_field 读取
        for store in ("_fields", "_extensions"):
            values = self.__dict__.get(store, {})
            if name in values:
                return values[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def _check_namespace(self, name: str) -> None:
        prefix, sep, _ = name.partition(":")
        if not sep or prefix not in self.service.accepted_namespaces():
            raise ExtensionAttributeError(name)

    def set_property(self, name: str, value: Any) -> None:
        """设置扩展属性

        属性名中 ':' 之前的前缀必须在服务接受的命名空间中，否则抛出 ExtensionAttributeError。
        """
        self._check_namespace(name)
        self._extensions[name] = value

    def get_property(self, name: str, default: Any = None) -> Any:
        """读取扩展属性"""
        return self._extensions.get(name, default)

    def get_field(self, name: str, default: Any = None) -> Any:
        """读取领域字段"""
        if name in _CORE_FIELDS:
            return getattr(self, name)
        return self._fields.get(name, default)

    @property
    def extensions(self) -> Dict[str, Any]:
        return dict(self._extensions)

    @property
    def fields(self) -> Dict[str, Any]:
        return dict(self._fields)

    def _copy_fields(self, fields: Mapping[str, Any]) -> None:
        """原样复制字段，已有字段被覆盖，缺失字段保持不变

        领域字段存放在 _fields 中，不会覆盖句柄自身的方法和属性。
        """
        for key, value in fields.items():
            if key in _CORE_FIELDS:
                object.__setattr__(self, key, value)
            elif ":" in key:
                self._extensions[key] = value
            else:
                self._fields[key] = value

    def _apply_document(self, fields: Mapping[str, Any]) -> None:
        """合并刷新得到的字段，扩展属性先全部校验，失败时不修改句柄"""
        for key in fields:
            if ":" in key:
                self._check_namespace(key)
        self._copy_fields(fields)

    def json_name(self) -> str:
        """刷新响应的 JSON 信封名称"""
        if self.kind is None:
            raise DocumentError(f"{type(self).__name__} 未定义 JSON 信封名称")
        return self.kind.envelope_name

    def _resource_type(self) -> str:
        return self.kind.envelope_name if self.kind is not None else type(self).__name__

    # ---------- URL ----------

    def find_link(self, rel: str = "self") -> Optional[str]:
        """返回第一个 rel 匹配的链接地址，没有则返回 None"""
        for link in self.links or []:
            if link.get("rel") == rel:
                return link.get("href")
        return None

    def url(self, subresource: Optional[str] = None) -> str:
        """解析资源 URL

        Args:
            subresource: 追加在资源地址后的子路径，例如 "action"

        Raises:
            ResourceUrlError: 既没有 self 链接也没有 ID
        """
        base = self.find_link("self")
        if not base:
            if not self.id:
                raise ResourceUrlError(f"{self._resource_type()} 没有可用的地址")
            base = f"{self.service.base_url().rstrip('/')}/{self.id}"
        if subresource:
            return f"{base.rstrip('/')}/{subresource}"
        return base

    # ---------- 刷新 ----------

    @staticmethod
    def _check_response(response: Any) -> ServiceResponse:
        if not hasattr(response, "status_code") or not hasattr(response, "body"):
            raise TransportError(f"无法识别的响应对象: {type(response).__name__}")
        return response

    def refresh(self, id: Optional[str] = None) -> None:
        """从服务端刷新资源

        总是请求 集合地址/ID，忽略已有的 self 链接。响应体为空时不修改任何字段。

        Raises:
            ResourceIdRequiredError: 没有可用的 ID
            ResourceNotFoundError: 服务端返回 404
            UnknownError: 其他 >=300 的状态码
            ResourceDecodeError: 响应不是合法 JSON 或不是单一信封对象
            ExtensionAttributeError: 响应含未注册命名空间的属性
            DocumentError: 资源类型未定义信封名称，此时不发请求
        """
        resource_id = id or self.id
        if not resource_id:
            raise ResourceIdRequiredError(f"刷新 {self._resource_type()} 需要资源 ID")

        envelope = self.json_name()
        url = f"{self.service.base_url().rstrip('/')}/{resource_id}"
        logger.debug(f"刷新 {self._resource_type()}: {url}")
        response = self._check_response(self.service.request(url))

        if response.status_code == 404:
            raise ResourceNotFoundError(f"资源不存在: {url}")
        if response.status_code >= 300:
            raise UnknownError(
                f"刷新 {url} 返回非预期状态码 {response.status_code}: {response.body}",
                status_code=response.status_code,
                body=response.body,
            )

        if not response.body:
            return

        try:
            document = json.loads(response.body)
        except json.JSONDecodeError as e:
            raise ResourceDecodeError(f"无法解析 {url} 的响应: {e}") from e

        if (
            not isinstance(document, dict)
            or set(document) != {envelope}
            or not isinstance(document[envelope], dict)
        ):
            raise ResourceDecodeError(f"{url} 的响应必须是只含 '{envelope}' 信封的对象")

        self._apply_document(document[envelope])

    # ---------- 等待 ----------

    def is_terminal(self, terminal: str = ResourceStatus.ACTIVE) -> bool:
        """当前状态是否为目标状态或 ERROR"""
        return self.status == ResourceStatus.ERROR or self.status == terminal

    def iter_states(
        self,
        terminal: str = ResourceStatus.ACTIVE,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        interval: Optional[float] = None,
    ) -> Iterator["ComputeResource"]:
        """轮询资源状态，每次刷新后产出句柄本身

        在状态为 ERROR、等于 terminal、超时或 cancel 被设置时结束。
        刷新失败直接抛出，不在这里重试。
        """
        polling = get_config().polling
        timeout = polling.max_timeout if timeout is None else timeout
        interval = polling.interval if interval is None else interval

        start = time.monotonic()
        while cancel is None or not cancel.is_set():
            self.refresh(self.id)
            yield self

            if self.is_terminal(terminal):
                return
            if time.monotonic() - start > timeout:
                return

            if cancel is not None:
                cancel.wait(interval)
            else:
                time.sleep(interval)

    def wait_for(
        self,
        terminal: str = ResourceStatus.ACTIVE,
        timeout: Optional[float] = None,
        callback: Optional[Callable[["ComputeResource"], None]] = None,
        cancel: Optional[threading.Event] = None,
        interval: Optional[float] = None,
    ) -> None:
        """阻塞等待资源进入 terminal 状态

        不区分成功、ERROR 和超时，调用方需在返回后检查 status。
        """
        for state in self.iter_states(terminal, timeout, cancel, interval):
            if callback is not None:
                callback(state)

        if self.is_terminal(terminal):
            logger.info(f"{self._resource_type()} {self.id} 状态: {self.status}")
        elif cancel is not None and cancel.is_set():
            logger.warning(f"{self._resource_type()} {self.id} 等待已取消，当前状态: {self.status}")
        else:
            logger.warning(f"{self._resource_type()} {self.id} 等待 {terminal} 超时，当前状态: {self.status}")

    # ---------- 动作 ----------

    def action(self, payload: Mapping[str, Any]):
        """向 /action 子资源发送动作请求

        Returns:
            成功时返回原始响应；payload 无法序列化时返回 False

        Raises:
            ResourceIdRequiredError: 资源没有 ID
            ActionError: payload 不是对象，或服务端返回 >=300
            TransportError: 传输层返回了无法识别的响应
        """
        resource_type = self._resource_type()
        if not self.id:
            raise ResourceIdRequiredError(f"{resource_type} 动作需要资源 ID")
        if not isinstance(payload, Mapping):
            raise ActionError(
                f"动作参数必须是对象: {type(payload).__name__}",
                resource_type=resource_type,
            )

        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as e:
            logger.error(f"{resource_type} 动作参数序列化失败: {e}")
            return False

        url = self.url("action")
        logger.debug(f"POST {url}: {body}")
        response = self._check_response(
            self.service.request(url, method="POST", headers={}, body=body)
        )

        if response.status_code >= 300:
            raise ActionError(
                f"{resource_type} 动作失败 [{url}]: {response.body}",
                resource_type=resource_type,
                url=url,
                body=response.body,
            )
        return response

    # ---------- 导出 ----------

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        data = {key: getattr(self, key) for key in _CORE_FIELDS}
        data.update(self._fields)
        data.update(self._extensions)
        return data

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} status={self.status!r}>"
