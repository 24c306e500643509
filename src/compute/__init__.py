"""计算类资源模块

提供虚拟机、数据库实例等远程资源的状态刷新、轮询等待和动作请求
"""

from .errors import (
    ComputeError,
    InvalidArgumentError,
    ResourceUrlError,
    ResourceIdRequiredError,
    ResourceNotFoundError,
    ResourceDecodeError,
    UnknownError,
    ActionError,
    ExtensionAttributeError,
    DocumentError,
    TransportError,
)
from .kinds import ResourceKind, SERVER, DATABASE_INSTANCE
from .status import ResourceStatus
from .resource import ComputeResource
from .instances import Server, DatabaseInstance

__all__ = [
    "ComputeResource",
    "Server",
    "DatabaseInstance",
    "ResourceKind",
    "ResourceStatus",
    "SERVER",
    "DATABASE_INSTANCE",
    "ComputeError",
    "InvalidArgumentError",
    "ResourceUrlError",
    "ResourceIdRequiredError",
    "ResourceNotFoundError",
    "ResourceDecodeError",
    "UnknownError",
    "ActionError",
    "ExtensionAttributeError",
    "DocumentError",
    "TransportError",
]
