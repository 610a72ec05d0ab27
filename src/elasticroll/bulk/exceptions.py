"""批量写入工具异常定义模块."""

from ..exceptions import ElasticRollError


class BulkOperationError(ElasticRollError):
    """批量写入基础异常类."""

    pass


class BulkValidationError(BulkOperationError, ValueError):
    """批量写入参数校验异常."""

    pass


class BulkResponseError(BulkOperationError):
    """批量写入响应与请求无法对应（条目数不一致等）."""

    pass
