"""并发执行器模块。

在线程池中独立执行每个压缩任务，按输入顺序返回结果，支持协作式取消。
"""

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from ..exceptions import BatchCancelledError, ErrorHandler
from ..models.compression_result import CompressionResult, ItemOutcome


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchTask:
    """单个输入的任务描述"""

    index: int
    data: bytes
    name: str
    media_type: str | None = None


class ConcurrentExecutor:
    """通用并发执行器

    每个任务互不影响，单个任务失败只体现在它自己的结果中。
    """

    def __init__(self, max_workers: int = 4):
        """初始化并发执行器

        Args:
            max_workers: 最大并发数
        """
        self.max_workers = max_workers

    def execute_tasks(
        self,
        tasks: Sequence[BatchTask],
        task_function: Callable[[BatchTask], CompressionResult],
        cancel_event: threading.Event | None = None,
    ) -> list[ItemOutcome]:
        """执行并发任务

        Args:
            tasks: 任务列表
            task_function: 要执行的任务函数
            cancel_event: 置位后尚未开始的任务不再执行

        Returns:
            list[ItemOutcome]: 与 tasks 顺序一致的结果列表
        """
        if not tasks:
            return []

        outcomes: list[ItemOutcome | None] = [None] * len(tasks)
        workers = min(self.max_workers, len(tasks))
        logger.debug(f"使用ThreadPoolExecutor: 任务数={len(tasks)}, 线程数={workers}")

        with ThreadPoolExecutor(max_workers=workers) as executor:
            # 提交任务阶段
            future_to_task = self._submit_tasks(
                executor, tasks, task_function, cancel_event, outcomes
            )

            # 收集结果阶段
            self._collect_results(future_to_task, outcomes)

        return [outcome for outcome in outcomes if outcome is not None]

    def _submit_tasks(
        self,
        executor: ThreadPoolExecutor,
        tasks: Sequence[BatchTask],
        task_function: Callable[[BatchTask], CompressionResult],
        cancel_event: threading.Event | None,
        outcomes: list[ItemOutcome | None],
    ) -> dict[Future[CompressionResult], BatchTask]:
        """提交任务到执行器"""
        future_to_task = {}

        for task in tasks:
            try:
                future = executor.submit(
                    self._run_task, task, task_function, cancel_event
                )
                future_to_task[future] = task
            except RuntimeError as e:
                outcomes[task.index] = ErrorHandler.handle_item_error(
                    e, task.index, task.name, "任务提交"
                )

        return future_to_task

    @staticmethod
    def _run_task(
        task: BatchTask,
        task_function: Callable[[BatchTask], CompressionResult],
        cancel_event: threading.Event | None,
    ) -> CompressionResult:
        if cancel_event is not None and cancel_event.is_set():
            raise BatchCancelledError("批次已取消", task.name)
        return task_function(task)

    def _collect_results(
        self,
        future_to_task: dict[Future[CompressionResult], BatchTask],
        outcomes: list[ItemOutcome | None],
    ) -> None:
        """收集任务执行结果"""
        for future in as_completed(future_to_task):
            task = future_to_task[future]

            try:
                result = future.result()
                outcomes[task.index] = ItemOutcome(
                    index=task.index, name=task.name, success=True, result=result
                )
                logger.debug(f"处理成功: {task.name}")

            except Exception as e:
                outcomes[task.index] = ErrorHandler.handle_item_error(
                    e, task.index, task.name, "并发任务处理"
                )
