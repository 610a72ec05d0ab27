"""索引管理工具函数模块.

提供时间戳索引名的生成与解析、索引名校验以及截止时间的换算。
所有时间均按 UTC 处理。
"""

import re
from datetime import UTC, datetime

from ..typing import Cutoff
from .exceptions import IndexManagerValidationError

# 时间戳索引名中的时间格式：YYYYMMDD_HHmmss
INDEX_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

_TIMESTAMP_SUFFIX_PATTERN = re.compile(r"^_(\d{8}_\d{6})$")

# 索引名中不允许出现的字符（不含通配符）
_INVALID_INDEX_CHARS = frozenset(',#/\\"<>| \t\n\r')


def validate_alias_name(alias_name: str, field_name: str = "alias_name") -> None:
    """校验别名/前缀非空.

    Raises:
        IndexManagerValidationError: 为空或不是字符串时抛出
    """
    if not alias_name or not isinstance(alias_name, str):
        raise IndexManagerValidationError(f"{field_name} cannot be empty")


def validate_index_name(index_name: str, allow_wildcards: bool = False) -> bool:
    """验证索引名称是否符合 Elasticsearch 规范.

    Args:
        index_name: 索引名称
        allow_wildcards: 是否允许通配符

    Returns:
        是否有效

    Note:
        Elasticsearch 索引名称限制：
        - 不能以 . 或 _ 开头（系统索引除外，这里统一拒绝）
        - 不能包含 , # / \\ " < > | 空格
        - 长度不能超过 255 字节
    """
    if not index_name or not isinstance(index_name, str):
        return False

    if len(index_name.encode("utf-8")) > 255:
        return False

    if index_name.startswith((".", "_", "-", "+")):
        return False

    if any(char in _INVALID_INDEX_CHARS for char in index_name):
        return False

    if not allow_wildcards and ("*" in index_name or "?" in index_name):
        return False

    return True


def _as_utc(value: datetime) -> datetime:
    # naive datetime 视为 UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def timestamped_index_name(alias: str, now: datetime | None = None) -> str:
    """生成带时间戳的索引名.

    格式为 ``<alias>_<YYYYMMDD>_<HHmmss>``，时间统一使用 UTC。
    同一秒内多次调用会得到相同的名称，需要更细粒度时由调用方自行追加后缀。

    Args:
        alias: 别名（作为索引名前缀）
        now: 指定时间，默认取当前 UTC 时间

    Returns:
        索引名称

    Examples:
        >>> timestamped_index_name("logs", datetime(2024, 5, 1, 8, 3, 9, tzinfo=UTC))
        'logs_20240501_080309'
    """
    validate_alias_name(alias, "alias")
    moment = _as_utc(now) if now is not None else datetime.now(UTC)
    return f"{alias}_{moment.strftime(INDEX_TIMESTAMP_FORMAT)}"


def parse_index_timestamp(index_name: str, alias: str) -> datetime | None:
    """解析时间戳索引名中的时间.

    Args:
        index_name: 索引名称
        alias: 生成该索引名时使用的别名

    Returns:
        UTC 时间；索引名不是由该别名生成的时间戳索引名时返回 None
    """
    if not index_name.startswith(alias):
        return None
    match = _TIMESTAMP_SUFFIX_PATTERN.match(index_name[len(alias) :])
    if match is None:
        return None
    try:
        parsed = datetime.strptime(match.group(1), INDEX_TIMESTAMP_FORMAT)
    except ValueError:
        return None
    return parsed.replace(tzinfo=UTC)


def to_epoch_millis(value: Cutoff) -> int:
    """将截止时间统一转换为毫秒时间戳.

    Args:
        value: 毫秒时间戳（浮点数向下取整）或 datetime（naive 视为 UTC）

    Returns:
        毫秒时间戳
    """
    if isinstance(value, datetime):
        return int(_as_utc(value).timestamp() * 1000)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise IndexManagerValidationError(
            f"cutoff must be epoch milliseconds or a datetime, got {value!r}"
        )
    return int(value)
