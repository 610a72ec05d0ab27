"""索引管理器模块.

该模块提供时间戳索引的生命周期管理，包括：
- 带时间戳的索引创建与删除
- 按创建时间查找旧索引、按别名查找索引
- 别名的原子切换
- 过期索引清理（跳过别名当前指向的索引）
- 强制合并

示例用法:
    >>> from elasticroll.index_manager import IndexManager, RetentionSweeper
    >>> manager = IndexManager(es_client)
    >>> index_name = manager.create_timestamped_index(
    ...     "glossary", mappings={"properties": {"term": {"type": "keyword"}}}
    ... )
    >>> manager.optimize_index(index_name)
    >>> manager.set_alias_to_single_index("glossary", index_name)
    >>> RetentionSweeper(manager).cleanup_old_indices("glossary")
"""

from .exceptions import (
    AliasActionTypeError,
    AliasUpdateError,
    IndexAlreadyExistsError,
    IndexCleanupError,
    IndexManagerError,
    IndexManagerValidationError,
)
from .models import (
    AliasAction,
    AliasActionType,
    CleanupFailure,
    CleanupResult,
    IndexAge,
    IndexMappings,
    IndexSelection,
    IndexSettings,
    ManyIndices,
    SingleIndex,
)
from .retention import DEFAULT_RETENTION_DAYS, RetentionSweeper
from .tool import IndexManager
from .utils import (
    INDEX_TIMESTAMP_FORMAT,
    parse_index_timestamp,
    timestamped_index_name,
    validate_index_name,
)

__all__ = [
    # 核心类
    "IndexManager",
    "RetentionSweeper",
    "DEFAULT_RETENTION_DAYS",
    # 数据模型
    "AliasAction",
    "AliasActionType",
    "IndexSelection",
    "SingleIndex",
    "ManyIndices",
    "IndexAge",
    "CleanupResult",
    "CleanupFailure",
    # 类型定义
    "IndexSettings",
    "IndexMappings",
    # 工具函数
    "INDEX_TIMESTAMP_FORMAT",
    "timestamped_index_name",
    "parse_index_timestamp",
    "validate_index_name",
    # 异常类
    "IndexManagerError",
    "IndexManagerValidationError",
    "AliasActionTypeError",
    "IndexAlreadyExistsError",
    "AliasUpdateError",
    "IndexCleanupError",
]
