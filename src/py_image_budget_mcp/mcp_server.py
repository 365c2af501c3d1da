"""预算图像压缩 MCP 服务器。

把 ImageCompressor 的批量压缩、结果管理和统计操作暴露为 MCP 工具。
文件读写只发生在这一层。
"""

from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from .compressor import ImageCompressor
from .exceptions import CompressionError
from .models import BatchReport, CompressionResult, ItemOutcome
from .utils.logging_helpers import get_logger, setup_logging
from .utils.message_formatter import MessageFormatter
from .utils.naming_helpers import write_result


# MCP 服务器响应类型定义
MCPResponse = dict[str, Any]


class MCPResponseBuilder:
    """MCP 服务器响应构建器，专门用于构建符合 MCP 协议的响应格式。"""

    @staticmethod
    def error(
        message: str,
        error_type: str = "general",
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型
            details: 额外的错误详情

        Returns:
            dict: 标准化的错误响应
        """
        result = {
            "success": False,
            "error": message,
            "error_type": error_type,
        }

        if details:
            result["details"] = details

        return result

    @staticmethod
    def validation_error(message: str, field: str | None = None) -> dict[str, Any]:
        """构建验证错误结果。"""
        details = {"field": field} if field else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="validation",
            details=details,
        )

    @staticmethod
    def file_error(message: str, file_path: str | None = None) -> dict[str, Any]:
        """构建文件相关错误结果。"""
        details = {"file_path": file_path} if file_path else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="file",
            details=details,
        )


# 配置日志
setup_logging()
logger = get_logger(__name__)

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("预算图像压缩服务")

# 全局压缩器实例，结果集合在工具调用之间保留
compressor = ImageCompressor()


# ============================================================================
# 压缩工具
# ============================================================================


@mcp.tool()
def compress_images(
    input_paths: list[str] | str,
    output_dir: str | None = None,
    max_width: int | None = None,
    max_height: int | None = None,
    max_bytes: int | None = None,
    recursive: bool | None = None,
) -> MCPResponse:
    """把图像压缩为不超过字节预算的 WebP

    图像按比例缩放到最大宽高内（不放大），再二分搜索编码质量，
    取输出不超过 max_bytes 的最高质量。非图像文件会被跳过。

    Args:
        input_paths: 输入文件或目录，可以是单个路径或路径列表
        output_dir: 输出目录（可选），给出时写入 <原文件名>.webp
        max_width: 最大宽度（默认 1920）
        max_height: 最大高度（默认 1080）
        max_bytes: 输出字节上限（默认 102400）
        recursive: 目录处理时是否递归子目录（默认递归）

    Returns:
        dict: 每个输入的压缩结果以及累计统计
    """
    paths = [input_paths] if isinstance(input_paths, str) else input_paths

    try:
        report = compressor.compress_paths(
            paths,
            recursive=recursive,
            max_width=max_width,
            max_height=max_height,
            max_bytes=max_bytes,
        )
        return format_batch_response(report, Path(output_dir) if output_dir else None)

    except FileNotFoundError as e:
        logger.error(MessageFormatter.operation_failed("路径处理", paths, e))
        return MCPResponseBuilder.file_error(str(e))
    except CompressionError as e:
        logger.error(MessageFormatter.operation_failed("参数验证", paths, e))
        return MCPResponseBuilder.validation_error(e.message)
    except OSError as e:
        logger.error(MessageFormatter.operation_failed("读写文件", paths, e))
        return MCPResponseBuilder.file_error(str(e))


def format_batch_response(
    report: BatchReport, output_dir: Path | None = None
) -> dict[str, Any]:
    """格式化批量结果为MCP响应格式，给出 output_dir 时写出压缩文件"""
    return {
        "success": report.success,
        "error": report.error,
        "summary": report.get_summary(),
        "total_files": report.get_total_count(),
        "successful_files": report.get_success_count(),
        "failed_files": report.get_failure_count(),
        "results": [_format_outcome(outcome, output_dir) for outcome in report.results],
        "totals": compressor.totals().to_dict(),
    }


def _format_outcome(outcome: ItemOutcome, output_dir: Path | None) -> dict[str, Any]:
    """格式化单个输入的结果"""
    if not outcome.success or outcome.result is None:
        return {
            "index": outcome.index,
            "name": outcome.name,
            "success": False,
            "error": outcome.error,
            "error_type": outcome.error_type,
            "cancelled": outcome.cancelled,
        }

    formatted = {
        "index": outcome.index,
        "success": True,
        **outcome.result.to_summary_dict(),
    }
    if output_dir is not None:
        try:
            formatted["output_path"] = str(write_result(outcome.result, output_dir))
        except OSError as e:
            logger.error(MessageFormatter.operation_failed("写入文件", output_dir, e))
            formatted["write_error"] = str(e)
    return formatted


# ============================================================================
# 结果管理工具
# ============================================================================


@mcp.tool()
def list_results() -> MCPResponse:
    """列出当前保留的压缩结果（不含字节流）"""
    return {
        "success": True,
        "results": [r.to_summary_dict() for r in compressor.results],
        "totals": compressor.totals().to_dict(),
    }


@mcp.tool()
def save_result(result_id: str, output_dir: str) -> MCPResponse:
    """把一个已保留的结果写入输出目录

    Args:
        result_id: 结果标识
        output_dir: 输出目录
    """
    result: CompressionResult | None = compressor.get(result_id)
    if result is None:
        return MCPResponseBuilder.validation_error(
            MessageFormatter.result_not_found(result_id), "result_id"
        )

    try:
        output_path = write_result(result, output_dir)
    except OSError as e:
        logger.error(MessageFormatter.operation_failed("写入文件", output_dir, e))
        return MCPResponseBuilder.file_error(str(e), output_dir)

    return {"success": True, "id": result_id, "output_path": str(output_path)}


@mcp.tool()
def remove_result(result_id: str) -> MCPResponse:
    """按标识移除一个压缩结果"""
    if not compressor.remove(result_id):
        return MCPResponseBuilder.validation_error(
            MessageFormatter.result_not_found(result_id), "result_id"
        )
    return {
        "success": True,
        "removed": result_id,
        "totals": compressor.totals().to_dict(),
    }


@mcp.tool()
def clear_results() -> MCPResponse:
    """清空所有压缩结果"""
    removed = compressor.clear_all()
    return {"success": True, "removed_count": removed}


@mcp.tool()
def get_totals() -> MCPResponse:
    """累计原始大小、压缩后大小和节省比例"""
    return {"success": True, **compressor.totals().to_dict()}


# ============================================================================
# 应用入口
# ============================================================================


def main() -> None:
    """启动 MCP 服务器"""
    logger.info("启动预算图像压缩 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
