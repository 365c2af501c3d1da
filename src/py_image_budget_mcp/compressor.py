"""预算图像压缩器接口。

基于核心压缩引擎和批量处理器的简洁用户接口，
面向 UI / CLI / MCP 层暴露压缩、移除、清空和统计操作。
"""

import threading
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from .config import get_config
from .core.codec import ImageCodec
from .core.compression_engine import IdFactory, compress
from .engine.batch import BatchInput, BatchProcessor
from .engine.config import ConfigBuilder
from .exceptions import ValidationError
from .models import (
    BatchReport,
    CompressionConfig,
    CompressionResult,
    CompressionTotals,
    ValidationLimits,
)
from .utils.file_helpers import expand_input_paths, read_image_inputs
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()


class ImageCompressor:
    """预算图像压缩器。

    每次批量压缩都独立处理各个输入，成功的结果进入压缩器持有的结果集合，
    直到被单独移除或全部清空。
    """

    def __init__(
        self,
        max_workers: int | None = None,
        codec: ImageCodec | None = None,
        id_factory: IdFactory | None = None,
        config_builder: ConfigBuilder | None = None,
    ):
        """初始化压缩器。

        Args:
            max_workers: 批量处理时的最大并发数，默认读取全局配置
            codec: 编解码器，默认 PillowCodec（WebP）
            id_factory: 结果标识生成器，默认 uuid4
            config_builder: 配置构建器
        """
        if max_workers is None:
            max_workers = get_config().compression.MAX_WORKERS
        if max_workers <= 0:
            raise ValidationError(
                MessageFormatter.validation_error("max_workers", max_workers, "必须大于 0")
            )

        self.max_workers = max_workers
        self.config_builder = config_builder or ConfigBuilder()
        self.batch_processor = BatchProcessor(
            max_workers=max_workers,
            codec=codec,
            id_factory=id_factory,
        )

        logger.debug("初始化图像压缩器")

    def build_config(
        self, config: CompressionConfig | None = None, **overrides: Any
    ) -> CompressionConfig:
        """在默认配置或给定配置上叠加参数"""
        return self.config_builder.build(config, **overrides)

    def compress_image(
        self,
        data: bytes,
        name: str,
        media_type: str | None = None,
        config: CompressionConfig | None = None,
        **overrides: Any,
    ) -> CompressionResult:
        """压缩单个图像，不进入结果集合。

        Raises:
            DecodeError: 输入无法解码
            EncodeError: 编码器出错

        Examples:
            >>> compressor = ImageCompressor()
            >>> result = compressor.compress_image(data, "photo.png", max_bytes=50_000)
            >>> print(result.get_summary())
        """
        return compress(
            data,
            name,
            self.build_config(config, **overrides),
            codec=self.batch_processor.codec,
            id_factory=self.batch_processor.id_factory,
            media_type=media_type,
        )

    def compress_batch(
        self,
        files: Sequence[BatchInput],
        config: CompressionConfig | None = None,
        cancel_event: threading.Event | None = None,
        **overrides: Any,
    ) -> BatchReport:
        """批量压缩，按输入顺序返回每一项的结果。

        Args:
            files: (字节流, 文件名[, 媒体类型]) 序列
            config: 压缩配置，None 时使用默认值
            cancel_event: 置位后尚未开始的输入被标记为已取消
            **overrides: 覆盖配置字段，如 max_bytes=50_000

        Returns:
            BatchReport: 批量处理结果

        Raises:
            ValidationError: 配置无效或输入数量超过上限
        """
        self._check_batch_size(len(files))
        resolved = self.build_config(config, **overrides)
        return self.batch_processor.process_batch(files, resolved, cancel_event)

    def compress_paths(
        self,
        paths: Iterable[str | Path],
        recursive: bool | None = None,
        config: CompressionConfig | None = None,
        cancel_event: threading.Event | None = None,
        **overrides: Any,
    ) -> BatchReport:
        """读取文件或目录中的图像并批量压缩，非图像文件被跳过

        Raises:
            FileNotFoundError: 路径不存在
            ValidationError: 图像文件数量超过上限，此时不读取任何文件
        """
        processing = get_config().processing
        files = expand_input_paths(
            paths,
            recursive=processing.RECURSIVE if recursive is None else recursive,
            exclude_dirs=processing.EXCLUDE_DIRS,
            max_file_size_mb=processing.MAX_FILE_SIZE_MB,
        )
        logger.info(f"找到 {len(files)} 个图像文件")
        self._check_batch_size(len(files))
        return self.compress_batch(
            read_image_inputs(files), config, cancel_event, **overrides
        )

    @staticmethod
    def _check_batch_size(count: int) -> None:
        """输入数量超过上限时拒绝整个批次"""
        if count > ValidationLimits.MAX_BATCH_FILES:
            raise ValidationError(
                MessageFormatter.validation_error(
                    "files", count, f"最多 {ValidationLimits.MAX_BATCH_FILES} 个"
                )
            )

    @property
    def results(self) -> tuple[CompressionResult, ...]:
        """当前保留的结果"""
        return self.batch_processor.results

    def get(self, result_id: str) -> CompressionResult | None:
        return self.batch_processor.get(result_id)

    def remove(self, result_id: str) -> bool:
        """移除单个结果"""
        return self.batch_processor.remove(result_id)

    def clear_all(self) -> int:
        """清空所有结果"""
        return self.batch_processor.clear()

    def totals(self) -> CompressionTotals:
        """累计统计"""
        return self.batch_processor.totals()


# 便捷函数


def compress_batch(
    files: Sequence[BatchInput], config: CompressionConfig | None = None, **kwargs: Any
) -> BatchReport:
    """便捷的批量压缩函数

    Examples:
        >>> report = compress_batch([(data, "photo.jpg")], max_bytes=80 * 1024)
        >>> print(report.get_summary())
    """
    return ImageCompressor().compress_batch(files, config, **kwargs)
