"""消息格式化工具模块。

提供统一的错误消息、成功消息格式化功能。
"""

from pathlib import Path
from typing import Any


class MessageFormatter:
    """统一的消息格式化器"""

    @staticmethod
    def file_not_found(file_path: str | Path) -> str:
        """文件不存在错误消息"""
        return f"文件不存在: {file_path}"

    @staticmethod
    def not_an_image(file_path: str | Path) -> str:
        """非图像文件消息"""
        return f"跳过非图像文件: {file_path}"

    @staticmethod
    def file_too_large(file_path: str | Path, limit_mb: float) -> str:
        """文件过大消息"""
        return f"跳过超过 {limit_mb:g}MB 的文件: {file_path}"

    @staticmethod
    def result_not_found(result_id: str) -> str:
        """结果不存在消息"""
        return f"结果不存在: {result_id}"

    @staticmethod
    def operation_failed(
        operation: str, target: str | Path, error: Exception | None = None
    ) -> str:
        """操作失败消息"""
        msg = f"{operation}失败: {target}"
        if error:
            msg += f" - {error}"
        return msg

    @staticmethod
    def validation_error(field: str, value: Any, reason: str | None = None) -> str:
        """参数验证错误消息"""
        msg = f"参数验证失败 - {field}: {value}"
        if reason:
            msg += f" ({reason})"
        return msg

    @staticmethod
    def format_error(operation: str, name: str | Path, error: Exception) -> str:
        """格式化通用错误消息"""
        return f"{operation}失败 [{name}]: {error}"

    @staticmethod
    def budget_summary(
        name: str, size: int, max_bytes: int, quality: float, budget_met: bool
    ) -> str:
        """质量搜索结果消息"""
        status = "满足预算" if budget_met else "未满足预算，使用最小可得结果"
        return f"{name}: {size}/{max_bytes} bytes, quality={quality:.4f} ({status})"
