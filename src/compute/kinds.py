"""资源类型定义"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ResourceKind:
    """资源类型

    envelope_name: 刷新响应中包裹资源字段的顶层 JSON 键
    fields: 该类型声明的领域字段，赋值时不做命名空间校验
    """
    envelope_name: str
    fields: Tuple[str, ...] = ()


SERVER = ResourceKind(
    envelope_name="server",
    fields=(
        "name",
        "flavor",
        "image",
        "addresses",
        "metadata",
        "progress",
        "hostId",
        "accessIPv4",
        "accessIPv6",
        "created",
        "updated",
    ),
)

DATABASE_INSTANCE = ResourceKind(
    envelope_name="instance",
    fields=(
        "name",
        "flavor",
        "volume",
        "hostname",
        "created",
        "updated",
    ),
)
