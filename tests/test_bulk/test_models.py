"""批量写入数据模型单元测试."""

from elasticroll.bulk.models import (
    BulkItemError,
    BulkItemOutcome,
    BulkItemStatus,
    BulkReconciliation,
)


class TestBulkItemError:
    """BulkItemError 测试."""

    def test_defaults_for_missing_fields(self) -> None:
        """测试缺少字段时的默认值."""
        error = BulkItemError(doc_id="1", error={})
        assert error.error_type == "unknown"
        assert error.reason == "unknown error"
        assert error.caused_by is None

    def test_to_dict(self) -> None:
        """测试转换为字典."""
        error = BulkItemError(doc_id="1", error={"type": "x"}, status=400)
        assert error.to_dict() == {"id": "1", "error": {"type": "x"}}


class TestBulkReconciliation:
    """BulkReconciliation 测试."""

    def test_from_outcomes_keeps_order(self) -> None:
        """测试各类结果保持提交顺序."""
        error = BulkItemError(doc_id="3", error={"type": "x"})
        outcomes = [
            BulkItemOutcome("2", BulkItemStatus.CREATED),
            BulkItemOutcome("3", BulkItemStatus.ERROR, error),
            BulkItemOutcome("1", BulkItemStatus.CREATED),
            BulkItemOutcome("2", BulkItemStatus.UPDATED),
        ]

        result = BulkReconciliation.from_outcomes(outcomes)

        assert result.created_ids == ["2", "1"]
        assert result.updated_ids == ["2"]
        assert result.errors == [error]
        assert result.total == 4
        assert result.has_errors()

    def test_empty(self) -> None:
        """测试空结果."""
        result = BulkReconciliation()
        assert result.total == 0
        assert not result.has_errors()
        assert result.to_dict() == {"created": [], "updated": [], "errors": []}
