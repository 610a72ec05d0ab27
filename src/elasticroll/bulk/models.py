"""批量写入工具数据模型定义模块."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class BulkItemStatus(Enum):
    """单个文档写入结果类型枚举."""

    CREATED = "created"
    UPDATED = "updated"
    ERROR = "error"


@dataclass
class BulkItemError:
    """单个文档写入错误数据类.

    Attributes:
        doc_id: 文档ID
        error: ES 返回的错误详情（type、reason、可选的 caused_by）
        status: HTTP状态码
    """

    doc_id: str
    error: dict[str, Any]
    status: int | None = None

    @property
    def error_type(self) -> str:
        return self.error.get("type", "unknown")

    @property
    def reason(self) -> str:
        return self.error.get("reason", "unknown error")

    @property
    def caused_by(self) -> str | None:
        """根本原因，格式为 ``type: reason``."""
        cause = self.error.get("caused_by")
        if not cause:
            return None
        return f"{cause.get('type', '')}: {cause.get('reason', '')}"

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.doc_id, "error": self.error}


@dataclass
class BulkItemOutcome:
    """单个文档写入结果数据类.

    Attributes:
        doc_id: 文档ID
        status: 结果类型
        error: 错误详情（仅 status 为 ERROR 时存在）
    """

    doc_id: str
    status: BulkItemStatus
    error: BulkItemError | None = None


@dataclass
class BulkReconciliation:
    """批量写入结果归类.

    按结果类型将每个文档归入 created/updated/errors 三类，各类内部保持
    提交时的相对顺序。同一个ID可能同时出现在 created 和 updated 中
    （同一批次中先创建后覆盖）。

    Attributes:
        created_ids: 新建的文档ID
        updated_ids: 被覆盖的文档ID
        errors: 写入失败的文档
    """

    created_ids: list[str] = field(default_factory=list)
    updated_ids: list[str] = field(default_factory=list)
    errors: list[BulkItemError] = field(default_factory=list)

    @classmethod
    def from_outcomes(cls, outcomes: list[BulkItemOutcome]) -> "BulkReconciliation":
        reconciliation = cls()
        for outcome in outcomes:
            if outcome.status is BulkItemStatus.ERROR:
                reconciliation.errors.append(outcome.error)
            elif outcome.status is BulkItemStatus.CREATED:
                reconciliation.created_ids.append(outcome.doc_id)
            else:
                reconciliation.updated_ids.append(outcome.doc_id)
        return reconciliation

    @property
    def total(self) -> int:
        return len(self.created_ids) + len(self.updated_ids) + len(self.errors)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> dict[str, list[Any]]:
        """转换为 ``{"created": [...], "updated": [...], "errors": [...]}``."""
        return {
            "created": list(self.created_ids),
            "updated": list(self.updated_ids),
            "errors": [error.to_dict() for error in self.errors],
        }
