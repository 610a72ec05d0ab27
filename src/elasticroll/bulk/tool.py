"""批量写入核心工具类."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import ApiError

from ..typing import DocumentBody, DocumentId, DocumentPair
from .exceptions import BulkResponseError, BulkValidationError
from .models import BulkItemError, BulkItemOutcome, BulkItemStatus, BulkReconciliation

logger = logging.getLogger(__name__)


def _classify(meta: Mapping[str, Any]) -> BulkItemStatus:
    """根据写入结果区分新建与覆盖."""
    created = meta.get("created")
    if created is None:
        # 新版本 ES 不再返回 created 字段，只返回 result
        created = meta.get("result") == "created"
    return BulkItemStatus.CREATED if created else BulkItemStatus.UPDATED


class BulkWriteTool:
    """批量写入核心工具类.

    将一批 (文档ID, 文档) 以单个 _bulk 请求写入同一个索引，并把 ES 返回的
    逐条结果归类为新建、覆盖和失败三类。单条文档失败只体现在结果中，
    不会抛出异常；整个请求失败时 ES 客户端的异常原样抛出。不做分批与重试。

    Args:
        es_client: Elasticsearch 客户端实例
    """

    def __init__(self, es_client: Elasticsearch):
        if es_client is None:
            raise ValueError("es_client 不能为 None")
        self.es_client = es_client
        logger.info("初始化批量写入工具")

    def build_bulk_body(
        self,
        index_name: str,
        documents: Sequence[DocumentPair],
    ) -> list[dict[str, Any]]:
        """构建 _bulk 请求操作列表.

        每个文档生成两项：``{"index": {"_index": .., "_id": ..}}`` 与文档本身，
        顺序与输入一致。序列化交给 ES 客户端完成。

        Args:
            index_name: 目标索引或别名
            documents: (文档ID, 文档) 列表

        Returns:
            动作与文档交替排列的操作列表
        """
        if not index_name or not isinstance(index_name, str):
            raise BulkValidationError("index_name 不能为空")

        operations: list[dict[str, Any]] = []
        for position, pair in enumerate(documents):
            try:
                doc_id, document = pair
            except (TypeError, ValueError) as e:
                raise BulkValidationError(
                    f"第 {position} 项必须是 (文档ID, 文档) 二元组"
                ) from e
            if not isinstance(document, Mapping):
                raise BulkValidationError(
                    f"文档 '{doc_id}' 必须是字典，当前类型: {type(document).__name__}"
                )
            operations.append({"index": {"_index": index_name, "_id": str(doc_id)}})
            operations.append(document)
        return operations

    def parse_bulk_response(
        self,
        response: Mapping[str, Any],
        doc_ids: Sequence[str],
    ) -> list[BulkItemOutcome]:
        """将 _bulk 响应逐条转换为写入结果.

        响应中的 items 与提交的文档按位置一一对应。

        Args:
            response: _bulk 响应
            doc_ids: 提交的文档ID，顺序与请求一致

        Returns:
            写入结果列表，顺序与请求一致

        Raises:
            BulkResponseError: items 数量与提交的文档数量不一致
        """
        items = response.get("items", [])
        if len(items) != len(doc_ids):
            raise BulkResponseError(
                f"批量写入响应条目数 ({len(items)}) 与提交的文档数 ({len(doc_ids)}) 不一致"
            )

        outcomes: list[BulkItemOutcome] = []
        for item, submitted_id in zip(items, doc_ids):
            # 每个条目只有一个 key，即操作类型
            meta = item.get("index")
            if meta is None:
                meta = next(iter(item.values()), {})
            doc_id = str(meta.get("_id", submitted_id))

            error = meta.get("error")
            if error:
                if not isinstance(error, dict):
                    error = {"reason": str(error)}
                outcomes.append(
                    BulkItemOutcome(
                        doc_id=doc_id,
                        status=BulkItemStatus.ERROR,
                        error=BulkItemError(
                            doc_id=doc_id, error=error, status=meta.get("status")
                        ),
                    )
                )
                continue

            outcomes.append(BulkItemOutcome(doc_id=doc_id, status=_classify(meta)))
        return outcomes

    def index_document_bulk(
        self,
        index_name: str,
        documents: Sequence[DocumentPair],
    ) -> BulkReconciliation:
        """批量写入（新建或覆盖）文档并归类结果.

        Args:
            index_name: 目标索引或别名
            documents: (文档ID, 文档) 列表

        Returns:
            归类后的结果，created/updated/errors 各自保持提交顺序

        Example:
            >>> bulk_tool = BulkWriteTool(es_client)
            >>> result = bulk_tool.index_document_bulk(
            ...     "glossary", [("11", {"term": "alias"}), ("12", {"term": "index"})]
            ... )
            >>> print(result.created_ids, result.updated_ids, result.errors)
        """
        operations = self.build_bulk_body(index_name, documents)
        if not documents:
            return BulkReconciliation()

        doc_ids = [str(doc_id) for doc_id, _ in documents]

        try:
            response = self.es_client.bulk(operations=operations)
        except ApiError as e:
            logger.error(f"批量写入索引 '{index_name}' 失败: {e}")
            raise

        outcomes = self.parse_bulk_response(response, doc_ids)
        reconciliation = BulkReconciliation.from_outcomes(outcomes)

        for error in reconciliation.errors:
            logger.warning(
                f"文档 '{error.doc_id}' 写入索引 '{index_name}' 失败: "
                f"[{error.error_type}] {error.reason}"
            )
        logger.info(
            f"批量写入索引 '{index_name}': 新建 {len(reconciliation.created_ids)}, "
            f"覆盖 {len(reconciliation.updated_ids)}, 失败 {len(reconciliation.errors)}"
        )
        return reconciliation

    def index_document(
        self,
        index_name: str,
        doc_id: DocumentId,
        document: DocumentBody,
    ) -> BulkItemStatus:
        """写入（新建或覆盖）单个文档.

        Args:
            index_name: 目标索引或别名
            doc_id: 文档ID
            document: 文档内容

        Returns:
            BulkItemStatus.CREATED 或 BulkItemStatus.UPDATED

        Example:
            >>> bulk_tool = BulkWriteTool(es_client)
            >>> bulk_tool.index_document("glossary", 72, {"term": "alias"})
            <BulkItemStatus.CREATED: 'created'>
        """
        if not index_name or not isinstance(index_name, str):
            raise BulkValidationError("index_name 不能为空")

        try:
            response = self.es_client.index(
                index=index_name, id=str(doc_id), document=document
            )
        except ApiError as e:
            logger.error(f"写入文档 '{doc_id}' 到索引 '{index_name}' 失败: {e}")
            raise

        status = _classify(response)
        logger.info(f"文档 '{doc_id}' 写入索引 '{index_name}' 成功 ({status.value})")
        return status
