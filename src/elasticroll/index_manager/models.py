"""索引管理器数据模型定义模块."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypedDict

from .exceptions import AliasActionTypeError, IndexManagerValidationError


class IndexSettings(TypedDict, total=False):
    """索引设置类型定义.

    Attributes:
        number_of_shards: 主分片数量
        number_of_replicas: 副本分片数量
        refresh_interval: 刷新间隔
        analysis: 分析器配置
        mapping: 映射相关设置（如 total_fields.limit）
    """

    number_of_shards: int
    number_of_replicas: int
    refresh_interval: str
    analysis: dict[str, Any]
    mapping: dict[str, Any]


class IndexMappings(TypedDict, total=False):
    """索引映射类型定义.

    Attributes:
        properties: 字段属性映射
        dynamic: 动态映射策略
    """

    properties: dict[str, Any]
    dynamic: str | bool


@dataclass(frozen=True)
class IndexAge:
    """索引创建时间数据类.

    Attributes:
        name: 索引名称
        creation_date: 创建时间（毫秒时间戳，由 ES 提供）
    """

    name: str
    creation_date: int


# ==================== 别名操作 ====================


class IndexSelection(ABC):
    """别名操作中 add/remove 字段的取值.

    只有两种形态：SingleIndex（单个索引名）与 ManyIndices（索引名列表）。
    提交给 ES 时保持调用方给定的形态不变。
    """

    @abstractmethod
    def to_payload(self) -> str | list[str]:
        """提交给 _aliases 接口的 indices 字段."""
        pass

    @abstractmethod
    def names(self) -> list[str]:
        pass

    @staticmethod
    def parse(value: Any, field_name: str) -> "IndexSelection":
        """校验并转换调用方输入.

        Args:
            value: 单个索引名或索引名序列
            field_name: 字段名（"add" 或 "remove"），用于错误信息

        Returns:
            SingleIndex 或 ManyIndices

        Raises:
            AliasActionTypeError: 类型既不是字符串也不是字符串序列
            IndexManagerValidationError: 值为空
        """
        if isinstance(value, IndexSelection):
            return value

        if isinstance(value, str):
            if not value:
                raise IndexManagerValidationError(
                    f"Index to {field_name} cannot be an empty string"
                )
            return SingleIndex(value)

        if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
            if not all(isinstance(item, str) for item in value):
                raise AliasActionTypeError(
                    f"Indices to {field_name} must either be a string "
                    "or a list of strings"
                )
            if not value or not all(value):
                raise IndexManagerValidationError(
                    f"Indices to {field_name} cannot be empty"
                )
            return ManyIndices(tuple(value))

        raise AliasActionTypeError(
            f"Indices to {field_name} must either be a string or a list of strings"
        )


@dataclass(frozen=True)
class SingleIndex(IndexSelection):
    """单个索引名."""

    name: str

    def to_payload(self) -> str:
        return self.name

    def names(self) -> list[str]:
        return [self.name]


@dataclass(frozen=True)
class ManyIndices(IndexSelection):
    """索引名列表."""

    indices: tuple[str, ...]

    def to_payload(self) -> list[str]:
        return list(self.indices)

    def names(self) -> list[str]:
        return list(self.indices)


class AliasActionType(Enum):
    """别名操作类型枚举."""

    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class AliasAction:
    """单个别名操作.

    Attributes:
        action: 操作类型
        alias: 别名名称
        indices: 操作涉及的索引
    """

    action: AliasActionType
    alias: str
    indices: IndexSelection

    def to_dict(self) -> dict[str, Any]:
        """转换为 _aliases 接口的 action 字典."""
        return {
            self.action.value: {
                "indices": self.indices.to_payload(),
                "alias": self.alias,
            }
        }


# ==================== 过期索引清理 ====================


@dataclass
class CleanupFailure:
    """单个索引删除失败记录.

    Attributes:
        index: 索引名称
        error: 失败原因（异常对象，或未确认时为 None）
    """

    index: str
    error: Exception | None = None

    @property
    def reason(self) -> str:
        if self.error is None:
            return "delete not acknowledged"
        return str(self.error)


@dataclass
class CleanupResult:
    """过期索引清理结果数据类.

    Attributes:
        alias: 别名（同时也是索引名前缀）
        cutoff: 截止时间（毫秒时间戳），早于该时间创建的索引为候选
        candidates: 候选索引（按创建时间倒序）
        protected: 当前被别名引用、因此跳过的索引
        deleted: 已删除的索引
        failed: 删除失败的索引
        dry_run: 是否为试运行
    """

    alias: str
    cutoff: int
    candidates: list[str] = field(default_factory=list)
    protected: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failed: list[CleanupFailure] = field(default_factory=list)
    dry_run: bool = False

    @property
    def to_delete(self) -> list[str]:
        """候选索引中未被别名引用的部分，保持候选顺序."""
        protected = set(self.protected)
        return [name for name in self.candidates if name not in protected]

    def is_success(self) -> bool:
        """判断清理是否全部成功."""
        return not self.failed
