"""ESClientFactory 单元测试.

覆盖客户端创建、认证方式、生命周期管理和健康检查功能。
"""

from unittest.mock import MagicMock, patch

import pytest

from elasticroll.connection.exceptions import ConnectionConfigError
from elasticroll.connection.models import ClusterConfig, ConnectionConfig
from elasticroll.connection.tool import ESClientFactory


@pytest.fixture
def cluster() -> ClusterConfig:
    """创建集群配置."""
    return ClusterConfig(hosts=["http://localhost:9200"])


ES_PATCH_PATH = "elasticroll.connection.tool.Elasticsearch"


# ============================================================
# 客户端创建测试
# ============================================================


class TestGetClient:
    """get_client 方法测试."""

    def test_none_cluster_raises_error(self) -> None:
        """测试未提供集群配置抛出 ConnectionConfigError."""
        with pytest.raises(ConnectionConfigError, match="cluster 不能为空"):
            ESClientFactory(None)

    @patch(ES_PATCH_PATH)
    def test_lazy_creation(self, mock_es, cluster) -> None:
        """测试构造时不创建客户端."""
        ESClientFactory(cluster)
        mock_es.assert_not_called()

    @patch(ES_PATCH_PATH)
    def test_client_lazy_caching(self, mock_es, cluster) -> None:
        """测试多次调用返回同一实例."""
        factory = ESClientFactory(cluster)
        client1 = factory.get_client()
        client2 = factory.get_client()
        assert client1 is client2
        assert mock_es.call_count == 1

    @patch(ES_PATCH_PATH)
    def test_default_connection_config(self, mock_es, cluster) -> None:
        """测试默认连接配置传递到 Elasticsearch 构造函数."""
        ESClientFactory(cluster).get_client()
        call_kwargs = mock_es.call_args[1]
        assert call_kwargs["hosts"] == ["http://localhost:9200"]
        assert call_kwargs["max_retries"] == 3
        assert call_kwargs["retry_on_timeout"] is True
        assert call_kwargs["request_timeout"] == 90
        assert call_kwargs["http_compress"] is True

    @patch(ES_PATCH_PATH)
    def test_custom_connection_config(self, mock_es, cluster) -> None:
        """测试自定义连接配置."""
        config = ConnectionConfig(max_retries=0, request_timeout=300)
        ESClientFactory(cluster, connection_config=config).get_client()
        call_kwargs = mock_es.call_args[1]
        assert call_kwargs["max_retries"] == 0
        assert call_kwargs["request_timeout"] == 300


# ============================================================
# 多认证方式测试
# ============================================================


class TestAuthentication:
    """多认证方式测试."""

    @patch(ES_PATCH_PATH)
    def test_basic_auth(self, mock_es) -> None:
        """测试 Basic Auth 传递到 Elasticsearch 构造函数."""
        cluster = ClusterConfig(
            hosts=["http://localhost:9200"],
            username="elastic",
            password="changeme",
        )
        ESClientFactory(cluster).get_client()
        assert mock_es.call_args[1]["basic_auth"] == ("elastic", "changeme")

    @patch(ES_PATCH_PATH)
    def test_api_key(self, mock_es) -> None:
        """测试 API Key 传递."""
        cluster = ClusterConfig(
            hosts=["http://localhost:9200"],
            api_key=("id", "api_key"),
        )
        ESClientFactory(cluster).get_client()
        assert mock_es.call_args[1]["api_key"] == ("id", "api_key")

    @patch(ES_PATCH_PATH)
    def test_bearer_token(self, mock_es) -> None:
        """测试 Bearer Token 传递."""
        cluster = ClusterConfig(
            hosts=["http://localhost:9200"],
            bearer_token="my_token",
        )
        ESClientFactory(cluster).get_client()
        assert mock_es.call_args[1]["bearer_auth"] == "my_token"

    @patch(ES_PATCH_PATH)
    def test_no_auth(self, mock_es, cluster) -> None:
        """测试无认证的客户端."""
        ESClientFactory(cluster).get_client()
        call_kwargs = mock_es.call_args[1]
        assert "basic_auth" not in call_kwargs
        assert "api_key" not in call_kwargs
        assert "bearer_auth" not in call_kwargs

    @patch(ES_PATCH_PATH)
    def test_ssl_config(self, mock_es) -> None:
        """测试 SSL 配置传递."""
        cluster = ClusterConfig(
            hosts=["https://localhost:9200"],
            ca_certs="/path/to/ca.crt",
            verify_certs=False,
        )
        ESClientFactory(cluster).get_client()
        call_kwargs = mock_es.call_args[1]
        assert call_kwargs["ca_certs"] == "/path/to/ca.crt"
        assert call_kwargs["verify_certs"] is False


# ============================================================
# 生命周期管理测试
# ============================================================


class TestLifecycle:
    """上下文管理器与 close 测试."""

    @patch(ES_PATCH_PATH)
    def test_exit_closes_client(self, mock_es, cluster) -> None:
        """测试上下文管理器退出时关闭客户端."""
        mock_client = MagicMock()
        mock_es.return_value = mock_client

        with ESClientFactory(cluster) as factory:
            assert isinstance(factory, ESClientFactory)
            factory.get_client()

        mock_client.close.assert_called_once()

    @patch(ES_PATCH_PATH)
    def test_close_without_client(self, mock_es, cluster) -> None:
        """测试未创建客户端时 close 不做任何事."""
        factory = ESClientFactory(cluster)
        factory.close()
        mock_es.assert_not_called()

    @patch(ES_PATCH_PATH)
    def test_close_error_is_logged(self, mock_es, cluster) -> None:
        """测试关闭失败不抛出异常."""
        mock_client = MagicMock()
        mock_client.close.side_effect = RuntimeError("boom")
        mock_es.return_value = mock_client

        factory = ESClientFactory(cluster)
        factory.get_client()
        factory.close()

    @patch(ES_PATCH_PATH)
    def test_recreate_after_close(self, mock_es, cluster) -> None:
        """测试关闭后再次获取会重新创建客户端."""
        factory = ESClientFactory(cluster)
        factory.get_client()
        factory.close()
        factory.get_client()
        assert mock_es.call_count == 2


# ============================================================
# 健康检查测试
# ============================================================


class TestHealthCheck:
    """health_check / is_healthy 测试."""

    @patch(ES_PATCH_PATH)
    def test_healthy_cluster(self, mock_es, cluster) -> None:
        """测试集群健康."""
        mock_es.return_value.cluster.health.return_value = {
            "cluster_name": "docker-cluster",
            "status": "yellow",
            "number_of_nodes": 1,
        }
        factory = ESClientFactory(cluster)

        assert factory.health_check() == {
            "cluster_name": "docker-cluster",
            "status": "yellow",
            "number_of_nodes": 1,
        }
        assert factory.is_healthy() is True

    @patch(ES_PATCH_PATH)
    def test_red_cluster(self, mock_es, cluster) -> None:
        """测试集群状态为 red."""
        mock_es.return_value.cluster.health.return_value = {"status": "red"}
        assert ESClientFactory(cluster).is_healthy() is False

    @patch(ES_PATCH_PATH)
    def test_unreachable_cluster(self, mock_es, cluster) -> None:
        """测试集群不可达."""
        mock_es.return_value.cluster.health.side_effect = ConnectionError("refused")
        factory = ESClientFactory(cluster)

        health = factory.health_check()

        assert health["status"] == "unreachable"
        assert health["error"] == "refused"
        assert factory.is_healthy() is False
