"""ES 客户端工厂工具模块.

使用示例:
    from elasticroll.connection import ESClientFactory, ClusterConfig
    from elasticroll.index_manager import IndexManager

    with ESClientFactory(ClusterConfig(hosts=["http://localhost:9200"])) as factory:
        manager = IndexManager(factory.get_client())
"""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import Elasticsearch

from .exceptions import ConnectionConfigError
from .models import ClusterConfig, ConnectionConfig

logger = logging.getLogger(__name__)


class ESClientFactory:
    """Elasticsearch 客户端工厂.

    按配置惰性创建并缓存一个客户端，显式传给各个工具类使用，不提供全局单例。

    Examples:
        >>> factory = ESClientFactory(ClusterConfig(hosts=["http://localhost:9200"]))
        >>> client = factory.get_client()
    """

    def __init__(
        self,
        cluster: ClusterConfig,
        connection_config: ConnectionConfig | None = None,
    ) -> None:
        """初始化客户端工厂.

        Args:
            cluster: 集群配置
            connection_config: 连接配置，默认使用 ConnectionConfig 的默认值

        Raises:
            ConnectionConfigError: 当 cluster 为空时抛出
        """
        if cluster is None:
            raise ConnectionConfigError("cluster 不能为空，请提供集群配置")
        self._cluster = cluster
        self._connection_config = connection_config or ConnectionConfig()
        self._client: Elasticsearch | None = None

    def _create_client(self) -> Elasticsearch:
        """根据认证方式和 SSL 配置构建客户端."""
        cluster = self._cluster
        kwargs: dict[str, Any] = {
            "hosts": cluster.hosts,
            "max_retries": self._connection_config.max_retries,
            "retry_on_timeout": self._connection_config.retry_on_timeout,
            "request_timeout": self._connection_config.request_timeout,
            "http_compress": self._connection_config.http_compress,
        }

        if cluster.username and cluster.password:
            kwargs["basic_auth"] = (cluster.username, cluster.password)
        if cluster.api_key:
            kwargs["api_key"] = cluster.api_key
        if cluster.bearer_token:
            kwargs["bearer_auth"] = cluster.bearer_token

        if cluster.ca_certs:
            kwargs["ca_certs"] = cluster.ca_certs
        kwargs["verify_certs"] = cluster.verify_certs

        logger.info(f"创建 Elasticsearch 客户端: {cluster.hosts}")
        return Elasticsearch(**kwargs)

    def get_client(self) -> Elasticsearch:
        """获取客户端，首次调用时创建."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def close(self) -> None:
        """关闭已创建的客户端，之后可再次调用 get_client() 重新创建."""
        if self._client is None:
            return
        try:
            self._client.close()
        except Exception as e:
            logger.warning(f"关闭 Elasticsearch 客户端失败: {e}")
        self._client = None

    def __enter__(self) -> ESClientFactory:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def health_check(self) -> dict[str, Any]:
        """检查集群健康状态.

        Returns:
            包含 cluster_name、status、number_of_nodes 的字典；
            集群不可达时 status 为 "unreachable" 并附带 error
        """
        try:
            health = self.get_client().cluster.health()
            return {
                "cluster_name": health.get("cluster_name", "unknown"),
                "status": health.get("status", "unknown"),
                "number_of_nodes": health.get("number_of_nodes", 0),
            }
        except Exception as e:
            logger.warning(f"集群健康检查失败: {e}")
            return {
                "cluster_name": "unknown",
                "status": "unreachable",
                "error": str(e),
            }

    def is_healthy(self) -> bool:
        """集群状态为 green 或 yellow 时返回 True."""
        return self.health_check().get("status") in ("green", "yellow")
