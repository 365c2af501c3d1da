"""核心压缩模块。

包含尺寸策略、质量搜索、编解码原语和单图压缩引擎。
"""

from .codec import ImageCodec, PillowCodec
from .compression_engine import compress, new_result_id
from .dimensions import compute_dimensions
from .quality_search import SearchOutcome, find_best_quality


__all__ = [
    "ImageCodec",
    "PillowCodec",
    "SearchOutcome",
    "compress",
    "compute_dimensions",
    "find_best_quality",
    "new_result_id",
]
