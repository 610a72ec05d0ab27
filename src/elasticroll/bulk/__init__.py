"""批量写入工具模块.

该模块以单个 _bulk 请求写入一批文档，并将 ES 返回的逐条结果归类为：
- created: 新建的文档
- updated: 被覆盖的文档
- errors: 写入失败的文档（不抛出异常）

示例用法:
    >>> from elasticroll.bulk import BulkWriteTool
    >>> bulk_tool = BulkWriteTool(es_client)
    >>> documents = [("1", {"name": "Alice"}), ("2", {"name": "Bob"})]
    >>> result = bulk_tool.index_document_bulk("users", documents)
    >>> print(f"新建: {result.created_ids}, 覆盖: {result.updated_ids}")
"""

from .exceptions import (
    BulkOperationError,
    BulkResponseError,
    BulkValidationError,
)
from .models import (
    BulkItemError,
    BulkItemOutcome,
    BulkItemStatus,
    BulkReconciliation,
)
from .tool import BulkWriteTool

__all__ = [
    "BulkItemError",
    "BulkItemOutcome",
    "BulkItemStatus",
    "BulkReconciliation",
    "BulkWriteTool",
    "BulkOperationError",
    "BulkResponseError",
    "BulkValidationError",
]
