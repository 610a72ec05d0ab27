"""elasticroll 类型定义模块."""

from collections.abc import Sequence
from datetime import datetime
from typing import Any

# 别名操作中 add/remove 字段的输入类型：单个索引名或索引名列表
IndexNames = str | Sequence[str]

# 文档主体类型
DocumentBody = dict[str, Any]

# 文档ID类型（写入时统一转换为字符串）
DocumentId = str | int

# 批量写入的输入项：(文档ID, 文档主体)
DocumentPair = tuple[DocumentId, DocumentBody]

# 时间截止点：毫秒时间戳（整数或浮点数）或 datetime
Cutoff = int | float | datetime
