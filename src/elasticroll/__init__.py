"""elasticroll - Elasticsearch 时间戳索引轮换工具包.

为"别名 + 带时间戳的索引"模式提供客户端侧编排：

主要功能:
    - IndexManager: 创建/删除时间戳索引、查找旧索引、原子切换别名、强制合并
    - RetentionSweeper: 清理超出保留期且未被别名引用的索引
    - BulkWriteTool: 批量写入文档并归类新建/覆盖/失败结果
    - ESClientFactory: 按配置创建 Elasticsearch 客户端

使用示例:
    from elasticroll import BulkWriteTool, IndexManager, RetentionSweeper

    manager = IndexManager(es_client)
    index_name = manager.create_timestamped_index("glossary")
    BulkWriteTool(es_client).index_document_bulk(index_name, documents)
    manager.optimize_index(index_name)
    manager.set_alias_to_single_index("glossary", index_name)
    RetentionSweeper(manager).cleanup_old_indices("glossary")
"""

__version__ = "0.1.0"

from elasticroll.bulk import (
    BulkItemError,
    BulkItemStatus,
    BulkOperationError,
    BulkReconciliation,
    BulkWriteTool,
)
from elasticroll.connection import ClusterConfig, ConnectionConfig, ESClientFactory
from elasticroll.exceptions import ElasticRollError
from elasticroll.index_manager import (
    IndexAlreadyExistsError,
    IndexCleanupError,
    IndexManager,
    IndexManagerError,
    IndexManagerValidationError,
    RetentionSweeper,
    timestamped_index_name,
)

__all__ = [
    # 版本
    "__version__",
    # 核心类
    "IndexManager",
    "RetentionSweeper",
    "BulkWriteTool",
    "ESClientFactory",
    # 模型
    "BulkReconciliation",
    "BulkItemError",
    "BulkItemStatus",
    "ClusterConfig",
    "ConnectionConfig",
    # 工具函数
    "timestamped_index_name",
    # 异常
    "ElasticRollError",
    "IndexManagerError",
    "IndexManagerValidationError",
    "IndexAlreadyExistsError",
    "IndexCleanupError",
    "BulkOperationError",
]
