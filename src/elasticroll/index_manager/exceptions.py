"""索引管理器异常定义模块."""

from typing import Any

from ..exceptions import ElasticRollError


class IndexManagerError(ElasticRollError):
    """索引管理器基础异常类."""

    pass


class IndexManagerValidationError(IndexManagerError, ValueError):
    """本地参数校验异常，在发起任何请求之前抛出."""

    pass


class AliasActionTypeError(IndexManagerValidationError, TypeError):
    """别名操作中 add/remove 字段类型错误."""

    pass


class IndexAlreadyExistsError(IndexManagerError):
    """索引已存在异常.

    保留 ES 返回的状态码与响应体，调用方可据此决定是否忽略。

    Attributes:
        index_name: 索引名称
        status_code: ES 返回的 HTTP 状态码
        body: ES 返回的原始响应体
    """

    def __init__(
        self,
        message: str,
        index_name: str,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.index_name = index_name
        self.status_code = status_code
        self.body = body


class AliasUpdateError(IndexManagerError):
    """别名更新未被 ES 确认."""

    pass


class IndexCleanupError(IndexManagerError):
    """过期索引清理过程中有索引删除失败.

    Attributes:
        result: 本次清理的完整结果（已删除与失败的索引）
    """

    def __init__(self, message: str, result: Any) -> None:
        super().__init__(message)
        self.result = result
