"""elasticroll 异常定义模块."""


class ElasticRollError(Exception):
    """elasticroll 基础异常类."""

    pass
