"""压缩结果模型。

定义预算压缩操作的结果数据结构。
"""

from typing import Any

from humanize import naturalsize
from pydantic import BaseModel, ConfigDict, Field

from .constants import get_extension


class BaseResult(BaseModel):
    """结果基类，包含通用字段和方法"""

    success: bool = Field(description="是否成功")
    error: str | None = Field(None, description="错误信息")

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """格式化文件大小为人类可读格式"""
        return naturalsize(size_bytes, binary=True)


class CompressionResult(BaseModel):
    """单个图片的预算压缩结果，构建后不可变"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="结果唯一标识")
    name: str = Field(description="原始文件名")
    media_type: str | None = Field(None, description="原始媒体类型")

    # 原图
    original: bytes = Field(repr=False, description="原始字节流")
    original_size: int = Field(ge=0, description="原始文件大小（字节）")

    # 压缩后
    compressed: bytes = Field(repr=False, description="压缩后字节流")
    compressed_size: int = Field(ge=0, description="压缩后大小（字节）")
    output_format: str = Field("WEBP", description="输出格式")

    # 搜索结果
    quality: float = Field(description="最终采用的质量值")
    budget_met: bool = Field(description="是否满足字节预算")

    # 尺寸信息
    original_dimensions: tuple[int, int] = Field(description="原始尺寸")
    final_dimensions: tuple[int, int] = Field(description="最终尺寸")

    @property
    def was_resized(self) -> bool:
        return self.original_dimensions != self.final_dimensions

    def get_size_saved(self) -> int:
        """节省的字节数"""
        return max(0, self.original_size - self.compressed_size)

    def get_compression_ratio(self) -> float:
        """压缩比例（百分比）"""
        if self.original_size == 0:
            return 0.0
        return (self.get_size_saved() / self.original_size) * 100

    def get_original_size_human(self) -> str:
        """人类可读的原始文件大小"""
        return BaseResult.format_size(self.original_size)

    def get_compressed_size_human(self) -> str:
        """人类可读的压缩后文件大小"""
        return BaseResult.format_size(self.compressed_size)

    def get_download_name(self) -> str:
        """下载文件名：首个点号之前的部分加输出格式扩展名"""
        stem = self.name.split(".")[0] or "image"
        return f"{stem}{get_extension(self.output_format)}"

    def get_summary(self) -> str:
        """压缩结果摘要"""
        summary = (
            f"{self.get_original_size_human()} → {self.get_compressed_size_human()} "
            f"({self.get_compression_ratio():.1f}% 压缩, quality={self.quality:.4f})"
        )
        if not self.budget_met:
            summary += " [未满足预算]"
        return summary

    def to_summary_dict(self) -> dict[str, Any]:
        """不含字节流的摘要字典"""
        return {
            "id": self.id,
            "name": self.name,
            "media_type": self.media_type,
            "original_size": self.original_size,
            "compressed_size": self.compressed_size,
            "output_format": self.output_format,
            "quality": self.quality,
            "budget_met": self.budget_met,
            "original_dimensions": list(self.original_dimensions),
            "final_dimensions": list(self.final_dimensions),
            "compression_ratio": self.get_compression_ratio(),
            "size_saved": self.get_size_saved(),
            "download_name": self.get_download_name(),
            "summary": self.get_summary(),
        }


class ItemOutcome(BaseResult):
    """批量处理中单个输入的结果，成功时携带 CompressionResult"""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="输入序号")
    name: str = Field(description="输入文件名")
    result: CompressionResult | None = Field(None, description="压缩结果")
    error_type: str | None = Field(None, description="错误类型名")
    cancelled: bool = Field(False, description="是否因批次取消而未执行")


class ResultCollection(BaseResult):
    """结果集合基类，提供通用的统计方法"""

    results: list[Any] = Field(description="结果列表")

    def get_successful_items(self) -> list[Any]:
        """获取成功的结果项"""
        return [r for r in self.results if getattr(r, "success", False)]

    def get_failed_items(self) -> list[Any]:
        """获取失败的结果项"""
        return [r for r in self.results if not getattr(r, "success", False)]

    def get_total_count(self) -> int:
        """获取总数量"""
        return len(self.results)

    def get_success_count(self) -> int:
        """获取成功数量"""
        return len(self.get_successful_items())

    def get_failure_count(self) -> int:
        """获取失败数量"""
        return len(self.get_failed_items())

    def get_success_rate(self) -> float:
        """获取成功率（百分比）"""
        total = self.get_total_count()
        if total == 0:
            return 0.0
        return (self.get_success_count() / total) * 100


class BatchReport(ResultCollection):
    """批量处理结果"""

    results: list[ItemOutcome] = Field(description="按输入顺序排列的处理结果")
    cancelled: bool = Field(False, description="批次是否被取消")

    def get_compression_results(self) -> list[CompressionResult]:
        """所有成功项的压缩结果"""
        return [r.result for r in self.results if r.success and r.result is not None]

    def get_cancelled_count(self) -> int:
        """被取消的数量"""
        return sum(1 for r in self.results if r.cancelled)

    def get_summary(self) -> str:
        """批量处理摘要"""
        total = self.get_total_count()
        successful = self.get_success_count()
        summary = (
            f"处理 {successful}/{total} 个文件 (成功率 {self.get_success_rate():.1f}%)"
        )
        if self.cancelled:
            summary += f", 已取消 {self.get_cancelled_count()} 个"
        return summary


class CompressionTotals(BaseModel):
    """结果集合的累计统计"""

    model_config = ConfigDict(frozen=True)

    count: int = Field(ge=0, description="结果数量")
    original_bytes: int = Field(ge=0, description="原始总字节数")
    compressed_bytes: int = Field(ge=0, description="压缩后总字节数")

    @property
    def saved_bytes(self) -> int:
        return self.original_bytes - self.compressed_bytes

    @property
    def percent_saved(self) -> float:
        """节省百分比，原始总量为 0 时为 0"""
        if self.original_bytes == 0:
            return 0.0
        return self.saved_bytes / self.original_bytes * 100

    def get_summary(self) -> str:
        """累计节省摘要"""
        return (
            f"总节省 {naturalsize(self.saved_bytes, binary=True)} "
            f"({self.percent_saved:.1f}%)"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "original_bytes": self.original_bytes,
            "compressed_bytes": self.compressed_bytes,
            "saved_bytes": self.saved_bytes,
            "percent_saved": self.percent_saved,
            "summary": self.get_summary(),
        }
