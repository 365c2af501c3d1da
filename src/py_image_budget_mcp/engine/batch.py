"""批量处理器模块。

独立压缩每个输入并按顺序汇报结果，同时维护已完成结果的集合。
"""

import threading
from collections.abc import Iterable, Sequence
from functools import partial

from ..core.codec import ImageCodec, PillowCodec
from ..core.compression_engine import IdFactory, compress, new_result_id
from ..models.compression_config import CompressionConfig
from ..models.compression_result import (
    BatchReport,
    CompressionResult,
    CompressionTotals,
    ItemOutcome,
)
from ..utils.logging_helpers import get_logger
from .concurrent_executor import BatchTask, ConcurrentExecutor


logger = get_logger()

# (字节流, 文件名) 或 (字节流, 文件名, 媒体类型)
BatchInput = tuple[bytes, str] | tuple[bytes, str, str | None]


class BatchProcessor:
    """批量图像处理器

    process_all 本身无共享状态；结果集合的追加、删除、清空由锁串行化。
    """

    def __init__(
        self,
        max_workers: int = 4,
        codec: ImageCodec | None = None,
        id_factory: IdFactory | None = None,
    ):
        """初始化批量处理器

        Args:
            max_workers: 最大并发数
            codec: 编解码器，默认 PillowCodec
            id_factory: 结果标识生成器
        """
        self.max_workers = max_workers
        self.codec = codec or PillowCodec()
        self.id_factory = id_factory or new_result_id
        self.concurrent_executor = ConcurrentExecutor(max_workers)

        self._results: list[CompressionResult] = []
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # 批量压缩
    # ------------------------------------------------------------------

    def process_all(
        self,
        inputs: Sequence[BatchInput],
        config: CompressionConfig,
        cancel_event: threading.Event | None = None,
    ) -> list[ItemOutcome]:
        """并发处理所有输入

        Args:
            inputs: 输入序列
            config: 压缩配置
            cancel_event: 置位后尚未开始的输入标记为已取消

        Returns:
            list[ItemOutcome]: 与输入顺序一致的结果
        """
        tasks = [self._to_task(index, item) for index, item in enumerate(inputs)]
        return self.concurrent_executor.execute_tasks(
            tasks,
            partial(self._compress_task, config=config),
            cancel_event,
        )

    def process_batch(
        self,
        inputs: Sequence[BatchInput],
        config: CompressionConfig,
        cancel_event: threading.Event | None = None,
    ) -> BatchReport:
        """处理所有输入并把成功的结果追加到集合"""
        outcomes = self.process_all(inputs, config, cancel_event)
        success = not outcomes or any(o.success for o in outcomes)
        report = BatchReport(
            results=outcomes,
            success=success,
            error=None if success else "所有文件处理都失败",
            cancelled=any(o.cancelled for o in outcomes),
        )
        self.append_results(report.get_compression_results())
        logger.info(report.get_summary())
        return report

    def _compress_task(
        self, task: BatchTask, config: CompressionConfig
    ) -> CompressionResult:
        return compress(
            task.data,
            task.name,
            config,
            codec=self.codec,
            id_factory=self.id_factory,
            media_type=task.media_type,
        )

    @staticmethod
    def _to_task(index: int, item: BatchInput) -> BatchTask:
        data, name, *rest = item
        return BatchTask(
            index=index,
            data=data,
            name=name,
            media_type=rest[0] if rest else None,
        )

    # ------------------------------------------------------------------
    # 结果集合
    # ------------------------------------------------------------------

    @property
    def results(self) -> tuple[CompressionResult, ...]:
        """当前结果集合的快照"""
        with self._lock:
            return tuple(self._results)

    def append_results(self, results: Iterable[CompressionResult]) -> None:
        """追加一批结果"""
        results = list(results)
        with self._lock:
            self._results.extend(results)
        logger.debug(f"追加 {len(results)} 个结果")

    def get(self, result_id: str) -> CompressionResult | None:
        """按标识查找结果"""
        with self._lock:
            return next((r for r in self._results if r.id == result_id), None)

    def remove(self, result_id: str) -> bool:
        """按标识移除结果，返回是否找到"""
        with self._lock:
            remaining = [r for r in self._results if r.id != result_id]
            removed = len(remaining) != len(self._results)
            self._results = remaining
        if removed:
            logger.debug(f"已移除结果: {result_id}")
        return removed

    def clear(self) -> int:
        """清空结果集合，返回移除数量"""
        with self._lock:
            count = len(self._results)
            self._results = []
        logger.debug(f"已清空 {count} 个结果")
        return count

    def totals(self) -> CompressionTotals:
        """累计原始/压缩字节数及节省比例"""
        with self._lock:
            snapshot = list(self._results)
        return CompressionTotals(
            count=len(snapshot),
            original_bytes=sum(r.original_size for r in snapshot),
            compressed_bytes=sum(r.compressed_size for r in snapshot),
        )
