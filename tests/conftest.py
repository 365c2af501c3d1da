"""测试配置文件。

提供测试所需的fixtures、假编解码器和测试图片。
"""

import itertools
import threading
import time
from dataclasses import dataclass
from io import BytesIO

import pytest
from PIL import Image, ImageDraw

from py_image_budget_mcp.config import reset_config
from py_image_budget_mcp.exceptions import DecodeError, EncodeError


# ============================================================================
# 假编解码器
# ============================================================================


@dataclass(frozen=True)
class FakeBuffer:
    width: int
    height: int


def fake_image(width: int, height: int) -> bytes:
    """FakeCodec 能解码的输入"""
    return f"FAKE {width}x{height}".encode()


class LinearEncoder:
    """size = round(slope * quality) 的模拟编码器，记录每次调用"""

    def __init__(self, slope: float = 200_000):
        self.slope = slope
        self.calls: list[float] = []

    def __call__(self, quality: float) -> tuple[bytes, int]:
        self.calls.append(quality)
        return f"q={quality!r}".encode(), round(self.slope * quality)


class FakeCodec:
    """不依赖 Pillow 的编解码器，编码大小随质量线性增长"""

    output_format = "WEBP"

    def __init__(
        self,
        slope: float = 200_000,
        delay: float = 0.0,
        fail_encode_for: set[int] | None = None,
        max_quality: float = 1.0,
    ):
        self.slope = slope
        self.max_quality = max_quality
        self.delay = delay
        self.fail_encode_for = fail_encode_for or set()
        self.scale_calls: list[tuple[int, int]] = []
        self._lock = threading.Lock()

    def decode(self, data: bytes) -> FakeBuffer:
        if self.delay:
            time.sleep(self.delay)
        if not data.startswith(b"FAKE "):
            raise DecodeError("无法识别的图像格式")
        width, height = data[5:].decode().split("x")
        return FakeBuffer(int(width), int(height))

    def size_of(self, buffer: FakeBuffer) -> tuple[int, int]:
        return buffer.width, buffer.height

    def scale(self, buffer: FakeBuffer, width: int, height: int) -> FakeBuffer:
        with self._lock:
            self.scale_calls.append((width, height))
        return FakeBuffer(width, height)

    def encode(self, buffer: FakeBuffer, quality: float) -> tuple[bytes, int]:
        if buffer.width in self.fail_encode_for:
            raise EncodeError("编码器崩溃")
        return f"{buffer.width}x{buffer.height}@{quality!r}".encode(), round(
            self.slope * quality
        )


def sequential_ids(prefix: str = "img"):
    """可预测的结果标识生成器"""
    counter = itertools.count(1)
    lock = threading.Lock()

    def factory() -> str:
        with lock:
            return f"{prefix}-{next(counter)}"

    return factory


# ============================================================================
# 测试图片
# ============================================================================


def make_image_bytes(
    size: tuple[int, int] = (400, 300),
    mode: str = "RGB",
    format: str = "PNG",
    color: object = "white",
    detailed: bool = True,
) -> bytes:
    """生成测试图片字节流，detailed 时画上彩色矩形"""
    img = Image.new(mode, size, color=color)
    if detailed and mode in ("RGB", "RGBA"):
        draw = ImageDraw.Draw(img)
        width, height = size
        for i in range(50):
            x, y = (i * 37) % width, (i * 23) % height
            fill = (i * 5 % 256, i * 7 % 256, i * 11 % 256)
            if mode == "RGBA":
                fill = (*fill, 100 + (i * 15) % 155)
            draw.rectangle([x, y, x + width // 8, y + height // 8], fill=fill)

    buffer = BytesIO()
    img.save(buffer, format=format)
    return buffer.getvalue()


def make_noise_bytes(size: tuple[int, int] = (400, 300)) -> bytes:
    """高熵噪声图片，编码大小随质量明显变化"""
    img = Image.merge(
        "RGB",
        [Image.effect_noise(size, 64) for _ in range(3)],
    )
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


# ============================================================================
# fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _fresh_config():
    """每个测试使用全新的全局配置"""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fake_codec() -> FakeCodec:
    return FakeCodec()


@pytest.fixture
def id_factory():
    return sequential_ids()


@pytest.fixture
def linear_encoder() -> LinearEncoder:
    return LinearEncoder()


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def noise_bytes() -> bytes:
    return make_noise_bytes()
