"""索引管理器核心工具类."""

import logging
from typing import Any

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import ApiError, NotFoundError

from ..typing import Cutoff, IndexNames
from .exceptions import (
    AliasUpdateError,
    IndexAlreadyExistsError,
    IndexManagerValidationError,
)
from .models import (
    AliasAction,
    AliasActionType,
    IndexAge,
    IndexMappings,
    IndexSelection,
    IndexSettings,
)
from .utils import (
    timestamped_index_name,
    to_epoch_millis,
    validate_alias_name,
    validate_index_name,
)

logger = logging.getLogger(__name__)

# ES 5.x 使用 index_already_exists_exception，6.x 及以后为 resource_already_exists_exception
_ALREADY_EXISTS_ERROR_TYPES = frozenset(
    {"resource_already_exists_exception", "index_already_exists_exception"}
)


def _error_type(error: ApiError) -> str | None:
    """从 ES 错误响应体中提取错误类型."""
    body = error.body
    if not isinstance(body, dict):
        return None
    detail = body.get("error")
    if isinstance(detail, dict):
        return detail.get("type")
    return None


def _require_index_name(index_name: str) -> None:
    if not validate_index_name(index_name):
        raise IndexManagerValidationError(
            f"索引名称 '{index_name}' 不符合 Elasticsearch 规范"
        )


class IndexManager:
    """索引管理器核心类.

    负责时间戳索引的创建与删除、按创建时间查找旧索引、别名的原子切换以及
    强制合并。所有状态（别名绑定、索引创建时间）每次调用都重新从 ES 读取，
    不做任何缓存。

    Args:
        es_client: Elasticsearch 客户端实例
    """

    def __init__(self, es_client: Elasticsearch):
        if es_client is None:
            raise ValueError("es_client 不能为 None")
        self.es_client = es_client
        logger.info("初始化索引管理器")

    # ==================== 索引创建与删除 ====================

    def create_index(
        self,
        index_name: str,
        mappings: IndexMappings | None = None,
        settings: IndexSettings | None = None,
    ) -> bool:
        """创建索引.

        Args:
            index_name: 索引名称
            mappings: 索引映射配置
            settings: 索引设置配置

        Returns:
            ES 是否确认创建

        Raises:
            IndexManagerValidationError: 索引名称不符合 Elasticsearch 规范时抛出
            IndexAlreadyExistsError: 索引已存在时抛出
            elasticsearch.ApiError: 其他 ES 错误，原样抛出

        Example:
            >>> manager = IndexManager(es_client)
            >>> manager.create_index(
            ...     "users", mappings={"properties": {"name": {"type": "keyword"}}}
            ... )
        """
        _require_index_name(index_name)

        body: dict[str, Any] = {}
        if mappings:
            body["mappings"] = mappings
        if settings:
            body["settings"] = settings

        try:
            response = self.es_client.indices.create(index=index_name, **body)
        except ApiError as e:
            if _error_type(e) in _ALREADY_EXISTS_ERROR_TYPES:
                logger.warning(f"索引 '{index_name}' 已存在")
                raise IndexAlreadyExistsError(
                    f"索引 '{index_name}' 已存在",
                    index_name=index_name,
                    status_code=e.status_code,
                    body=e.body,
                ) from e
            logger.error(f"创建索引 '{index_name}' 失败: {e}")
            raise

        acknowledged = bool(response.get("acknowledged", False))
        if acknowledged:
            logger.info(f"索引 '{index_name}' 创建成功")
        else:
            logger.warning(f"索引 '{index_name}' 创建请求未被确认")
        return acknowledged

    def create_timestamped_index(
        self,
        alias: str,
        mappings: IndexMappings | None = None,
        settings: IndexSettings | None = None,
    ) -> str:
        """创建以别名为前缀、带 UTC 时间戳的索引.

        Args:
            alias: 别名（索引名前缀）
            mappings: 索引映射配置
            settings: 索引设置配置

        Returns:
            新建的索引名称，格式为 ``<alias>_<YYYYMMDD>_<HHmmss>``

        Example:
            >>> manager = IndexManager(es_client)
            >>> manager.create_timestamped_index("glossary")
            'glossary_20240501_080309'
        """
        index_name = timestamped_index_name(alias)
        self.create_index(index_name, mappings=mappings, settings=settings)
        return index_name

    def delete_index(self, index_name: str) -> bool:
        """删除单个索引.

        不接受通配符，避免一次误删多个索引。索引不存在等错误原样抛出。

        Args:
            index_name: 索引名称

        Returns:
            ES 是否确认删除

        Example:
            >>> manager = IndexManager(es_client)
            >>> manager.delete_index("glossary_20240501_080309")
        """
        _require_index_name(index_name)

        try:
            response = self.es_client.indices.delete(index=index_name)
        except ApiError as e:
            logger.error(f"删除索引 '{index_name}' 失败: {e}")
            raise

        acknowledged = bool(response.get("acknowledged", False))
        if acknowledged:
            logger.info(f"索引 '{index_name}' 删除成功")
        else:
            logger.warning(f"索引 '{index_name}' 删除请求未被确认")
        return acknowledged

    def optimize_index(
        self,
        index_name: str,
        request_timeout: float | None = None,
    ) -> bool:
        """将索引强制合并为一个段.

        强制合并可能在服务端持续数十秒到数分钟。默认沿用客户端配置的
        request_timeout，不额外设置更短的超时，也不做任何重试。

        Args:
            index_name: 索引名称
            request_timeout: 仅对本次请求生效的超时时间（秒），默认不覆盖

        Returns:
            所有分片均合并成功时返回 True

        Example:
            >>> manager = IndexManager(es_client)
            >>> manager.optimize_index("glossary_20240501_080309")
        """
        _require_index_name(index_name)

        client = self.es_client
        if request_timeout is not None:
            client = client.options(request_timeout=request_timeout)

        try:
            response = client.indices.forcemerge(index=index_name, max_num_segments=1)
        except ApiError as e:
            logger.error(f"强制合并索引 '{index_name}' 失败: {e}")
            raise

        shards = response.get("_shards", {})
        failed = shards.get("failed", 0)
        if failed:
            logger.warning(
                f"索引 '{index_name}' 部分合并失败: "
                f"{failed}/{shards.get('total', 0)} 个分片失败"
            )
            return False

        logger.info(f"索引 '{index_name}' 强制合并成功 (max_num_segments=1)")
        return True

    # ==================== 索引查找 ====================

    def get_indices_older_than(self, alias_name: str, cutoff: Cutoff) -> list[str]:
        """查找以别名为前缀、创建时间早于截止时间的索引.

        Args:
            alias_name: 别名（索引名前缀），匹配 ``<alias_name>*``
            cutoff: 截止时间，毫秒时间戳或 datetime

        Returns:
            创建时间严格早于 cutoff 的索引名，按创建时间倒序排列（较新的在前）

        Raises:
            IndexManagerValidationError: alias_name 为空时抛出，不会发起请求

        Example:
            >>> manager = IndexManager(es_client)
            >>> manager.get_indices_older_than("glossary", 1525225677000)
            ['glossary_3', 'glossary_2']
        """
        validate_alias_name(alias_name)
        cutoff_millis = to_epoch_millis(cutoff)

        response = self.es_client.indices.get_settings(
            index=f"{alias_name}*", name="index.creation_date"
        )

        ages: list[IndexAge] = []
        for index_name, index_data in response.items():
            creation_date = (
                index_data.get("settings", {}).get("index", {}).get("creation_date")
            )
            if creation_date is None:
                logger.warning(f"索引 '{index_name}' 缺少 creation_date，已忽略")
                continue
            ages.append(IndexAge(name=index_name, creation_date=int(creation_date)))

        old = [age for age in ages if age.creation_date < cutoff_millis]
        old.sort(key=lambda age: (age.creation_date, age.name), reverse=True)
        return [age.name for age in old]

    def get_indices_for_alias(self, alias_name: str) -> list[str]:
        """获取别名当前指向的所有索引.

        Args:
            alias_name: 别名名称

        Returns:
            索引名称列表；别名不存在时返回空列表

        Example:
            >>> manager = IndexManager(es_client)
            >>> manager.get_indices_for_alias("glossary")
            ['glossary_20240501_080309']
        """
        validate_alias_name(alias_name)

        try:
            response = self.es_client.indices.get_alias(name=alias_name)
        except NotFoundError:
            return []
        return list(response.keys())

    # ==================== 别名管理 ====================

    def build_alias_actions(
        self,
        alias_name: str,
        add: IndexNames | None = None,
        remove: IndexNames | None = None,
    ) -> list[AliasAction]:
        """校验参数并构建别名操作列表.

        add 在前，remove 在后。add/remove 可以是单个索引名或索引名列表，
        提交时保持原有形态。

        Raises:
            IndexManagerValidationError: 既没有 add 也没有 remove
            AliasActionTypeError: add/remove 既不是字符串也不是字符串列表
        """
        validate_alias_name(alias_name)
        if add is None and remove is None:
            raise IndexManagerValidationError(
                "You must add or remove at least one index"
            )

        actions: list[AliasAction] = []
        if add is not None:
            actions.append(
                AliasAction(
                    action=AliasActionType.ADD,
                    alias=alias_name,
                    indices=IndexSelection.parse(add, "add"),
                )
            )
        if remove is not None:
            actions.append(
                AliasAction(
                    action=AliasActionType.REMOVE,
                    alias=alias_name,
                    indices=IndexSelection.parse(remove, "remove"),
                )
            )
        return actions

    def update_alias(
        self,
        alias_name: str,
        add: IndexNames | None = None,
        remove: IndexNames | None = None,
    ) -> list[AliasAction]:
        """以一次原子请求为别名添加和/或移除索引.

        Args:
            alias_name: 别名名称
            add: 要加入别名的索引
            remove: 要从别名移除的索引

        Returns:
            已提交的别名操作列表

        Raises:
            IndexManagerValidationError: 参数校验失败，不会发起请求
            AliasUpdateError: ES 未确认本次更新

        Example:
            >>> manager = IndexManager(es_client)
            >>> manager.update_alias("glossary", add="glossary_2", remove=["glossary_1"])
        """
        actions = self.build_alias_actions(alias_name, add=add, remove=remove)

        try:
            response = self.es_client.indices.update_aliases(
                actions=[action.to_dict() for action in actions]
            )
        except ApiError as e:
            logger.error(f"更新别名 '{alias_name}' 失败: {e}")
            raise

        if not response.get("acknowledged", False):
            logger.warning(f"别名 '{alias_name}' 更新请求未被确认")
            raise AliasUpdateError(f"别名 '{alias_name}' 更新未被确认")

        logger.info(
            f"别名 '{alias_name}' 更新成功: "
            + ", ".join(
                f"{action.action.value} {action.indices.names()}" for action in actions
            )
        )
        return actions

    def set_alias_to_single_index(
        self, alias_name: str, index_name: str
    ) -> list[AliasAction]:
        """将别名原子地切换为只指向一个索引.

        先读取别名当前绑定的索引，再在同一个 _aliases 请求中加入新索引并
        移除其余所有索引。读取与更新之间不加锁，同一别名的并发切换需由
        调用方串行化。

        Args:
            alias_name: 别名名称
            index_name: 目标索引

        Returns:
            已提交的别名操作列表

        Example:
            >>> manager = IndexManager(es_client)
            >>> manager.set_alias_to_single_index("glossary", "glossary_20240501_080309")
        """
        _require_index_name(index_name)

        bound = self.get_indices_for_alias(alias_name)
        stale = [name for name in bound if name != index_name]
        if not stale:
            return self.update_alias(alias_name, add=index_name)
        return self.update_alias(alias_name, add=index_name, remove=stale)
