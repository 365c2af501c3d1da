"""图像处理相关常量定义。

基于 Pillow 动态能力的图像格式管理，避免硬编码重复。
"""

from typing import Final

from PIL import Image


class ImageFormats:
    """基于 Pillow 的动态图像格式管理"""

    # 只定义必要的别名映射（用户友好的别名）
    ALIASES: Final[dict[str, str]] = {
        "JPG": "JPEG",
    }

    # 只定义 Pillow 未提供的特殊 MIME 类型
    SPECIAL_MIME_TYPES: Final[dict[str, str]] = {
        "ICO": "image/x-icon",
        "PPM": "image/x-portable-pixmap",
        "PGM": "image/x-portable-graymap",
        "PBM": "image/x-portable-bitmap",
    }

    # 只定义首选扩展名（当 Pillow 有多个选择时）
    PREFERRED_EXTENSIONS: Final[dict[str, str]] = {
        "JPEG": ".jpg",
        "TIFF": ".tiff",
        "WEBP": ".webp",
    }

    # 可作为预算压缩目标的有损格式
    LOSSY_OUTPUT_FORMATS: Final[set[str]] = {"WEBP", "JPEG"}

    @classmethod
    def get_supported_formats(cls) -> set[str]:
        """动态获取 Pillow 支持的所有格式"""
        return {fmt.upper() for fmt in Image.registered_extensions().values() if fmt}

    @classmethod
    def get_supported_extensions(cls) -> set[str]:
        """动态获取 Pillow 支持的所有扩展名"""
        return set(Image.registered_extensions().keys())

    @classmethod
    def get_mime_type(cls, format_name: str) -> str:
        """动态获取 MIME 类型，优先使用 Pillow 信息"""
        format_upper = format_name.upper()

        if format_upper in cls.SPECIAL_MIME_TYPES:
            return cls.SPECIAL_MIME_TYPES[format_upper]

        if mime := Image.MIME.get(format_upper):
            return mime

        return f"image/{format_upper.lower()}"

    @classmethod
    def get_extension(cls, format_name: str) -> str:
        """动态获取扩展名，优先使用首选扩展名"""
        format_upper = format_name.upper()

        if format_upper in cls.PREFERRED_EXTENSIONS:
            return cls.PREFERRED_EXTENSIONS[format_upper]

        for ext, fmt in Image.registered_extensions().items():
            if fmt and fmt.upper() == format_upper:
                return ext.lower()

        return f".{format_upper.lower()}"


class ValidationLimits:
    """验证相关限制"""

    # 图像尺寸限制（WebP 单边上限 16383）
    MAX_DIMENSION: Final[int] = 16383

    # 最大批量处理文件数
    MAX_BATCH_FILES: Final[int] = 1000


# 便捷访问函数
def get_format_alias(format_str: str) -> str:
    """获取格式的标准名称"""
    format_upper = format_str.upper()
    return ImageFormats.ALIASES.get(format_upper, format_upper)


def get_mime_type(format_str: str) -> str:
    """获取格式的MIME类型"""
    standard_format = get_format_alias(format_str)
    return ImageFormats.get_mime_type(standard_format)


def get_extension(format_str: str) -> str:
    """获取格式的首选扩展名"""
    standard_format = get_format_alias(format_str)
    return ImageFormats.get_extension(standard_format)


def guess_media_type(name: str) -> str | None:
    """根据文件名后缀推断媒体类型，未知后缀返回 None"""
    dot = name.rfind(".")
    if dot == -1:
        return None
    format_name = Image.registered_extensions().get(name[dot:].lower())
    return get_mime_type(format_name) if format_name else None


def is_image_media_type(media_type: str | None) -> bool:
    """是否为图像媒体类型"""
    return bool(media_type) and media_type.startswith("image/")
