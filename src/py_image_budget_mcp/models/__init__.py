"""数据模型包。

定义预算压缩相关的数据结构和模型。
"""

from .compression_config import CompressionConfig, CompressionValidators
from .compression_result import (
    BatchReport,
    CompressionResult,
    CompressionTotals,
    ItemOutcome,
)
from .constants import (
    ImageFormats,
    ValidationLimits,
    get_extension,
    get_format_alias,
    get_mime_type,
    guess_media_type,
    is_image_media_type,
)
from .source_image import SourceImage


__all__ = [
    "BatchReport",
    "CompressionConfig",
    "CompressionResult",
    "CompressionTotals",
    "CompressionValidators",
    "ImageFormats",
    "ItemOutcome",
    "SourceImage",
    "ValidationLimits",
    "get_extension",
    "get_format_alias",
    "get_mime_type",
    "guess_media_type",
    "is_image_media_type",
]
