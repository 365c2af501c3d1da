"""预算压缩引擎模块。

解码、尺寸计算、缩放、质量搜索、组装结果，串成单个图像的压缩操作。
无 I/O，无共享状态，可在线程池中并发调用。
"""

import uuid
from collections.abc import Callable

from ..models.compression_config import CompressionConfig
from ..models.compression_result import CompressionResult
from ..models.constants import guess_media_type
from ..models.source_image import SourceImage
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .codec import ImageCodec, PillowCodec
from .dimensions import compute_dimensions
from .quality_search import find_best_quality


logger = get_logger()

IdFactory = Callable[[], str]


def new_result_id() -> str:
    """默认的结果标识生成器"""
    return str(uuid.uuid4())


def compress(
    source_bytes: bytes,
    name: str,
    config: CompressionConfig,
    codec: ImageCodec | None = None,
    id_factory: IdFactory | None = None,
    media_type: str | None = None,
) -> CompressionResult:
    """把单个图像压缩到配置的尺寸和字节预算内。

    Args:
        source_bytes: 原始字节流
        name: 原始文件名
        config: 压缩配置
        codec: 编解码器，默认 PillowCodec（WebP）
        id_factory: 结果标识生成器，默认 uuid4
        media_type: 声明的媒体类型，默认按文件名推断

    Returns:
        CompressionResult: 压缩结果

    Raises:
        DecodeError: 输入无法解码为图像
        EncodeError: 编码器出错
    """
    codec = codec or PillowCodec()
    id_factory = id_factory or new_result_id

    # 解码
    buffer = codec.decode(source_bytes)
    source_width, source_height = codec.size_of(buffer)
    source = SourceImage(
        data=source_bytes,
        name=name,
        media_type=media_type or guess_media_type(name),
        byte_size=len(source_bytes),
        width=source_width,
        height=source_height,
    )

    # 调整尺寸（如果需要）
    target_width, target_height = compute_dimensions(
        source.width, source.height, config.max_width, config.max_height
    )
    if (target_width, target_height) != source.dimensions:
        logger.debug(
            f"{name}: 缩放 {source.width}x{source.height} -> "
            f"{target_width}x{target_height}"
        )
        buffer = codec.scale(buffer, target_width, target_height)

    # 质量搜索
    # 质量上界不超过编解码器实际能区分的范围
    upper = max(config.min_quality, min(config.max_quality, codec.max_quality))
    outcome = find_best_quality(
        lambda quality: codec.encode(buffer, quality),
        config.min_quality,
        upper,
        config.max_bytes,
        config.quality_search_iterations,
    )

    log = logger.info if outcome.budget_met else logger.warning
    log(
        MessageFormatter.budget_summary(
            name, outcome.size, config.max_bytes, outcome.quality, outcome.budget_met
        )
    )

    return CompressionResult(
        id=id_factory(),
        name=source.name,
        media_type=source.media_type,
        original=source.data,
        original_size=source.byte_size,
        compressed=outcome.artifact,
        compressed_size=outcome.size,
        output_format=codec.output_format,
        quality=outcome.quality,
        budget_met=outcome.budget_met,
        original_dimensions=source.dimensions,
        final_dimensions=(target_width, target_height),
    )
