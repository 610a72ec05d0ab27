"""时间戳索引轮换使用示例.

本文件展示了"别名 + 带时间戳的索引"模式的完整重建流程：
新建索引、批量写入、强制合并、切换别名、清理过期索引。
"""

import logging

from elasticroll.bulk import BulkWriteTool
from elasticroll.connection import ClusterConfig, ConnectionConfig, ESClientFactory
from elasticroll.index_manager import IndexCleanupError, IndexManager, RetentionSweeper

logging.basicConfig(level=logging.INFO)

ALIAS = "glossary"

MAPPINGS = {
    "properties": {
        "term": {"type": "keyword"},
        "definition": {"type": "text"},
    }
}

SETTINGS = {"number_of_shards": 1, "number_of_replicas": 0}


# ==================== 示例1：完整重建 ====================
def example_rebuild(es_client):
    """重建索引并原子切换别名."""
    manager = IndexManager(es_client)
    bulk_tool = BulkWriteTool(es_client)

    # 新建带时间戳的索引，如 glossary_20240501_080309
    index_name = manager.create_timestamped_index(
        ALIAS, mappings=MAPPINGS, settings=SETTINGS
    )

    documents = [
        ("1", {"term": "alias", "definition": "指向一个或多个索引的名称"}),
        ("2", {"term": "shard", "definition": "索引的物理分片"}),
        ("3", {"term": "segment", "definition": "分片内的 Lucene 段"}),
    ]
    result = bulk_tool.index_document_bulk(index_name, documents)
    print(f"新建: {result.created_ids}, 覆盖: {result.updated_ids}")
    for error in result.errors:
        print(f"  失败: {error.doc_id} [{error.error_type}] {error.reason}")

    # 写入完成后合并为单个段，可能耗时较长
    manager.optimize_index(index_name, request_timeout=300)

    # 别名只指向新索引
    manager.set_alias_to_single_index(ALIAS, index_name)
    return index_name


# ==================== 示例2：清理过期索引 ====================
def example_cleanup(es_client):
    """删除 7 天前创建且未被别名引用的索引."""
    sweeper = RetentionSweeper(IndexManager(es_client), retention_days=7)

    preview = sweeper.cleanup_old_indices(ALIAS, dry_run=True)
    print(f"待删除: {preview.to_delete}, 受保护: {preview.protected}")

    try:
        result = sweeper.cleanup_old_indices(ALIAS)
        print(f"已删除: {result.deleted}")
    except IndexCleanupError as e:
        print(f"已删除: {e.result.deleted}")
        for failure in e.result.failed:
            print(f"  删除失败: {failure.index} ({failure.reason})")


# ==================== 示例3：手动维护别名 ====================
def example_manual_alias(es_client):
    """手动添加与移除别名."""
    manager = IndexManager(es_client)

    print(f"当前指向: {manager.get_indices_for_alias(ALIAS)}")

    # add 在前、remove 在后，在同一个请求中原子执行
    manager.update_alias(
        ALIAS,
        add="glossary_20240502_000000",
        remove=["glossary_20240501_000000"],
    )


if __name__ == "__main__":
    factory = ESClientFactory(
        ClusterConfig(hosts=["http://localhost:9200"]),
        ConnectionConfig(request_timeout=90),
    )
    with factory:
        if factory.is_healthy():
            client = factory.get_client()
            example_rebuild(client)
            example_cleanup(client)
        else:
            print(f"集群不可用: {factory.health_check()}")
