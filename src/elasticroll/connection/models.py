"""ES 客户端工厂数据模型定义模块.

- ClusterConfig: 集群地址与认证配置
- ConnectionConfig: 超时与重试配置
"""

from dataclasses import dataclass, field

from .exceptions import ConnectionConfigError

# 强制合并等操作在服务端可能持续一分钟以上，默认超时需留出余量
DEFAULT_REQUEST_TIMEOUT = 90


@dataclass
class ClusterConfig:
    """集群配置模型.

    Attributes:
        hosts: ES 节点地址列表（必需，不可为空）
        username: Basic Auth 用户名
        password: Basic Auth 密码
        api_key: API Key 认证（字符串或元组）
        bearer_token: Bearer Token 认证
        ca_certs: CA 证书文件路径
        verify_certs: 是否验证 SSL 证书，默认 True

    Raises:
        ConnectionConfigError: 当 hosts 为空时抛出

    Examples:
        >>> config = ClusterConfig(
        ...     hosts=["http://localhost:9200"],
        ...     username="elastic",
        ...     password="changeme",
        ... )
    """

    hosts: list[str] = field(default_factory=list)
    username: str | None = None
    password: str | None = None
    api_key: str | tuple[str, str] | None = None
    bearer_token: str | None = None
    ca_certs: str | None = None
    verify_certs: bool = True

    def __post_init__(self) -> None:
        if not self.hosts:
            raise ConnectionConfigError("hosts 不能为空，请提供至少一个 ES 节点地址")
        if (self.username is None) != (self.password is None):
            raise ConnectionConfigError("username 与 password 必须同时提供")


@dataclass
class ConnectionConfig:
    """连接配置模型.

    重试与超时完全交给 Elasticsearch 客户端处理，本库各操作不会再额外重试
    或缩短超时。

    Attributes:
        max_retries: 最大重试次数，默认 3
        retry_on_timeout: 超时是否重试，默认 True
        request_timeout: 请求超时时间（秒），默认 90
        http_compress: 是否启用 HTTP 压缩，默认 True

    Raises:
        ConnectionConfigError: 当参数不合法时抛出
    """

    max_retries: int = 3
    retry_on_timeout: bool = True
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    http_compress: bool = True

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ConnectionConfigError(
                f"max_retries 必须 >= 0，当前值: {self.max_retries}"
            )
        if self.request_timeout < 0:
            raise ConnectionConfigError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )
