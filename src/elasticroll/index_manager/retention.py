"""过期索引清理模块.

基于 IndexManager 的查找、别名与删除接口进行组合编排，删除超出保留期
且未被别名引用的时间戳索引。
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from ..typing import Cutoff
from .exceptions import IndexCleanupError, IndexManagerValidationError
from .models import CleanupFailure, CleanupResult
from .tool import IndexManager
from .utils import to_epoch_millis

logger = logging.getLogger(__name__)

# 默认保留天数
DEFAULT_RETENTION_DAYS = 10


class RetentionSweeper:
    """过期索引清理器.

    每次清理都会重新读取索引创建时间和别名绑定，别名当前指向的索引
    无论多旧都不会被删除。

    Args:
        index_manager: IndexManager 实例
        retention_days: 保留天数，早于 ``now - retention_days`` 创建的索引为候选
        now_func: 获取当前时间的函数，主要用于测试，默认为 ``datetime.now(UTC)``

    Examples:
        >>> sweeper = RetentionSweeper(IndexManager(es_client), retention_days=7)
        >>> result = sweeper.cleanup_old_indices("glossary")
        >>> print(result.deleted)
    """

    def __init__(
        self,
        index_manager: IndexManager,
        retention_days: float = DEFAULT_RETENTION_DAYS,
        now_func: Callable[[], datetime] | None = None,
    ) -> None:
        if retention_days <= 0:
            raise IndexManagerValidationError(
                f"retention_days 必须 > 0，当前值: {retention_days}"
            )
        self._index_manager = index_manager
        self.retention_days = retention_days
        self._now_func = now_func or (lambda: datetime.now(UTC))
        logger.info(f"初始化过期索引清理器: retention_days={retention_days}")

    def default_cutoff(self) -> int:
        """当前时间减去保留期，单位为毫秒时间戳."""
        cutoff = self._now_func() - timedelta(days=self.retention_days)
        return to_epoch_millis(cutoff)

    def cleanup_old_indices(
        self,
        alias_name: str,
        cutoff: Cutoff | None = None,
        dry_run: bool = False,
    ) -> CleanupResult:
        """删除超出保留期且未被别名引用的索引.

        1. 查找以 alias_name 为前缀、创建时间早于 cutoff 的候选索引（较新的在前）
        2. 读取别名当前指向的索引
        3. 从候选中剔除别名指向的索引
        4. 按候选顺序逐个删除

        单个索引删除失败不会中断后续删除；全部尝试完毕后，如有失败则抛出
        IndexCleanupError，其 result 中包含已删除与失败的索引。

        Args:
            alias_name: 别名（同时也是索引名前缀）
            cutoff: 截止时间，默认为 default_cutoff()
            dry_run: 试运行模式，为 True 时仅返回待删除列表不实际删除

        Returns:
            清理结果

        Raises:
            IndexCleanupError: 有索引删除失败时抛出
        """
        cutoff_millis = (
            to_epoch_millis(cutoff) if cutoff is not None else self.default_cutoff()
        )
        result = CleanupResult(alias=alias_name, cutoff=cutoff_millis, dry_run=dry_run)

        result.candidates = self._index_manager.get_indices_older_than(
            alias_name, cutoff_millis
        )
        if not result.candidates:
            logger.info(f"别名 '{alias_name}' 没有需要清理的索引")
            return result

        bound = set(self._index_manager.get_indices_for_alias(alias_name))
        result.protected = [name for name in result.candidates if name in bound]
        if result.protected:
            logger.info(f"以下索引仍被别名 '{alias_name}' 引用，跳过: {result.protected}")

        to_delete = result.to_delete
        if dry_run:
            logger.info(f"试运行，待删除索引: {to_delete}")
            return result

        for index_name in to_delete:
            try:
                if self._index_manager.delete_index(index_name):
                    result.deleted.append(index_name)
                else:
                    result.failed.append(CleanupFailure(index=index_name))
            except Exception as e:
                result.failed.append(CleanupFailure(index=index_name, error=e))

        if result.failed:
            failed_names = [failure.index for failure in result.failed]
            logger.error(
                f"清理别名 '{alias_name}' 的过期索引时有 {len(failed_names)} 个删除失败: "
                f"{failed_names}"
            )
            raise IndexCleanupError(
                f"清理别名 '{alias_name}' 的过期索引失败: "
                + "; ".join(
                    f"{failure.index}: {failure.reason}" for failure in result.failed
                ),
                result=result,
            )

        logger.info(f"别名 '{alias_name}' 过期索引清理完成，已删除: {result.deleted}")
        return result
