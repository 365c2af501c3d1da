"""编解码原语模块。

提供解码、缩放、编码三个原语。压缩引擎只依赖 ImageCodec 协议，
默认实现基于 Pillow，输出 WebP。
"""

from io import BytesIO
from typing import Any, Protocol

from PIL import Image, ImageOps

from ..config import get_config
from ..exceptions import DecodeError, EncodeError, handle_codec_errors
from ..models.compression_config import CompressionValidators
from ..utils.logging_helpers import get_logger


logger = get_logger()


class ImageCodec(Protocol):
    """压缩引擎所需的编解码能力"""

    output_format: str
    max_quality: float

    def decode(self, data: bytes) -> Any:
        """字节流 -> 像素缓冲，失败时抛出 DecodeError"""
        ...

    def size_of(self, buffer: Any) -> tuple[int, int]:
        """像素缓冲的 (宽, 高)"""
        ...

    def scale(self, buffer: Any, width: int, height: int) -> Any:
        """缩放像素缓冲"""
        ...

    def encode(self, buffer: Any, quality: float) -> tuple[bytes, int]:
        """按 0-1 的质量值编码，返回 (字节流, 字节数)"""
        ...


class PillowCodec:
    """基于 Pillow 的编解码实现"""

    def __init__(
        self, output_format: str | None = None, webp_method: int | None = None
    ):
        """初始化编解码器

        Args:
            output_format: 有损输出格式，WEBP 或 JPEG，默认读取全局配置
            webp_method: WebP 编码速度/压缩率权衡 0-6，默认读取全局配置
        """
        defaults = get_config().compression
        self.output_format = CompressionValidators.validate_output_format(
            output_format or defaults.OUTPUT_FORMAT
        )
        self.webp_method = (
            webp_method if webp_method is not None else defaults.WEBP_METHOD
        )
        # JPEG 质量在 95 处封顶，更高的值编码结果相同
        self.max_quality = 0.95 if self.output_format == "JPEG" else 1.0

    @handle_codec_errors("图像解码", DecodeError)
    def decode(self, data: bytes) -> Image.Image:
        if not data:
            raise DecodeError("输入为空")

        with Image.open(BytesIO(data)) as img:
            img.load()
            # 处理EXIF旋转
            transposed = ImageOps.exif_transpose(img)
            if transposed is None or transposed is img:
                # 离开 with 后原图会被关闭
                transposed = img.copy()
            return self._prepare_for_format(transposed)

    def size_of(self, buffer: Image.Image) -> tuple[int, int]:
        return buffer.size

    def scale(self, buffer: Image.Image, width: int, height: int) -> Image.Image:
        if buffer.size == (width, height):
            return buffer
        return buffer.resize((width, height), Image.Resampling.LANCZOS)

    @handle_codec_errors("图像编码", EncodeError)
    def encode(self, buffer: Image.Image, quality: float) -> tuple[bytes, int]:
        output = BytesIO()
        buffer.save(output, **self._save_parameters(quality))
        data = output.getvalue()
        return data, len(data)

    def _save_parameters(self, quality: float) -> dict[str, Any]:
        """把 0-1 的质量值映射为 Pillow 保存参数"""
        quality = min(1.0, max(0.0, quality))

        match self.output_format:
            case "WEBP":
                # libwebp 接受 0-100 的浮点质量
                return {
                    "format": "WEBP",
                    "quality": quality * 100,
                    "method": self.webp_method,
                }
            case "JPEG":
                return {
                    "format": "JPEG",
                    "quality": max(1, min(95, round(quality * 100))),
                    "optimize": True,
                }
            case _:
                raise EncodeError(f"不支持的输出格式: {self.output_format}")

    def _prepare_for_format(self, img: Image.Image) -> Image.Image:
        """按输出格式转换色彩模式"""
        if self.output_format == "JPEG":
            return self._prepare_for_jpeg(img)
        return self._prepare_for_webp(img)

    @staticmethod
    def _prepare_for_webp(img: Image.Image) -> Image.Image:
        """WebP 只支持 RGB 和 RGBA"""
        if img.mode == "P":
            # 调色板模式，检查是否有透明度
            if "transparency" in img.info:
                return img.convert("RGBA")
            return img.convert("RGB")
        if img.mode in ("LA", "PA"):
            return img.convert("RGBA")
        if img.mode not in ("RGB", "RGBA"):
            # L、1、CMYK、I、F 等
            return img.convert("RGB")
        return img

    @staticmethod
    def _prepare_for_jpeg(img: Image.Image) -> Image.Image:
        """JPEG 不支持透明度，合成到白色背景"""
        if img.mode == "P" and "transparency" in img.info:
            img = img.convert("RGBA")
        if img.mode in ("LA", "PA"):
            img = img.convert("RGBA")

        if img.mode == "RGBA":
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background

        if img.mode != "RGB":
            return img.convert("RGB")
        return img
