"""核心功能测试。

测试尺寸策略、质量搜索、压缩引擎和 Pillow 编解码器。
"""

from io import BytesIO

import pytest
from PIL import Image

from py_image_budget_mcp.config import reset_config
from py_image_budget_mcp.core.codec import PillowCodec
from py_image_budget_mcp.core.compression_engine import compress
from py_image_budget_mcp.core.dimensions import compute_dimensions
from py_image_budget_mcp.core.quality_search import find_best_quality
from py_image_budget_mcp.exceptions import DecodeError, ValidationError
from py_image_budget_mcp.models.compression_config import CompressionConfig
from tests.conftest import FakeCodec, LinearEncoder, fake_image, make_image_bytes


class TestDimensionPolicy:
    """尺寸策略测试"""

    def test_downscale_4k_to_1080p(self):
        assert compute_dimensions(3840, 2160, 1920, 1080) == (1920, 1080)

    def test_small_image_unchanged(self):
        assert compute_dimensions(800, 600, 1920, 1080) == (800, 600)

    def test_exact_bounds_unchanged(self):
        assert compute_dimensions(1920, 1080, 1920, 1080) == (1920, 1080)

    def test_tall_image_limited_by_height(self):
        assert compute_dimensions(1000, 4000, 1920, 1080) == (270, 1080)

    def test_degenerate_axis_clamped_to_one(self):
        """极端宽高比不会得到 0 像素"""
        assert compute_dimensions(10000, 1, 100, 100) == (100, 1)
        assert compute_dimensions(1, 10000, 100, 100) == (1, 100)

    def test_zero_size_source_clamped(self):
        assert compute_dimensions(0, 0, 1920, 1080) == (1, 1)
        assert compute_dimensions(0, 5000, 1920, 1080) == (1, 1080)
        assert compute_dimensions(5000, 0, 1920, 1080) == (1920, 1)

    @pytest.mark.parametrize(
        "source",
        [(4000, 3000), (5000, 1234), (2500, 2500), (1921, 1080), (1920, 1081)],
    )
    def test_aspect_ratio_preserved(self, source: tuple[int, int]):
        width, height = compute_dimensions(*source, 1920, 1080)

        assert width <= 1920
        assert height <= 1080
        assert abs(width / height - source[0] / source[1]) < 0.01


class TestQualitySearch:
    """质量搜索测试"""

    def test_linear_encoder_scenario(self, linear_encoder: LinearEncoder):
        """size = round(200000 * q)，预算 100KB，10 步"""
        outcome = find_best_quality(linear_encoder, 0.0, 1.0, 102400, 10)

        assert outcome.budget_met is True
        assert outcome.quality == pytest.approx(0.51171875)
        assert outcome.size == 102344
        assert outcome.size <= 102400
        assert outcome.artifact == f"q={0.51171875!r}".encode()
        assert len(linear_encoder.calls) == 10

    @pytest.mark.parametrize("iterations", [1, 2, 5, 10, 16])
    def test_never_exceeds_iteration_cap(self, iterations: int):
        encoder = LinearEncoder()
        outcome = find_best_quality(encoder, 0.0, 1.0, 102400, iterations)

        assert len(encoder.calls) <= iterations
        assert outcome.encode_calls == len(encoder.calls)

    def test_keeps_narrowing_when_first_probe_fits(self):
        """预算宽松时仍跑满所有步数并逼近上界"""
        encoder = LinearEncoder(slope=1)
        outcome = find_best_quality(encoder, 0.0, 1.0, 102400, 10)

        assert len(encoder.calls) == 10
        assert outcome.quality == pytest.approx(1 - 1 / 2**10)
        assert outcome.budget_met is True

    def test_fallback_encodes_at_lower_bound(self):
        """没有探测满足预算时在下界重新编码"""
        encoder = LinearEncoder(slope=1e9)
        outcome = find_best_quality(encoder, 0.2, 0.8, 100, 10)

        assert outcome.budget_met is False
        assert outcome.quality == 0.2
        assert encoder.calls[-1] == 0.2
        assert outcome.encode_calls == 11
        assert outcome.size == round(1e9 * 0.2)

    @pytest.mark.parametrize("budget", [1, 12_345, 333_333, 500_000, 999_000])
    def test_returns_supremum_within_resolution(self, budget: int):
        """严格递增的编码器下，结果与可行上确界相差不超过 1/2^n"""
        iterations = 12
        encoder = LinearEncoder(slope=1_000_000)
        outcome = find_best_quality(encoder, 0.0, 1.0, budget, iterations)

        supremum = (budget + 0.5) / 1_000_000
        if outcome.budget_met:
            assert outcome.quality <= supremum
            assert supremum - outcome.quality <= 1 / 2**iterations + 1e-9
        else:
            assert supremum < 1 / 2**iterations

    def test_best_never_regresses(self):
        """最后几次探测超预算时仍返回之前找到的最佳结果"""
        encoder = LinearEncoder()
        outcome = find_best_quality(encoder, 0.0, 1.0, 102400, 10)

        # 最后两次探测都超出预算
        assert round(200_000 * encoder.calls[-1]) > 102400
        assert round(200_000 * encoder.calls[-2]) > 102400
        assert outcome.quality == max(
            q for q in encoder.calls if round(200_000 * q) <= 102400
        )

    def test_quality_within_bounds(self):
        outcome = find_best_quality(LinearEncoder(), 0.3, 0.7, 102400, 10)

        assert 0.3 <= outcome.quality <= 0.7

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_iterations": 0},
            {"lower": 0.9, "upper": 0.1},
            {"max_bytes": 0},
        ],
    )
    def test_invalid_arguments(self, kwargs: dict):
        params = {"lower": 0.0, "upper": 1.0, "max_bytes": 1000, "max_iterations": 5}
        params.update(kwargs)

        with pytest.raises(ValidationError):
            find_best_quality(LinearEncoder(), **params)


class TestCompressionEngine:
    """压缩引擎测试（假编解码器）"""

    def test_compress_downscales_and_searches(self, fake_codec, id_factory):
        data = fake_image(3840, 2160)
        result = compress(
            data, "photo.png", CompressionConfig(), fake_codec, id_factory
        )

        assert fake_codec.scale_calls == [(1920, 1080)]
        assert result.id == "img-1"
        assert result.name == "photo.png"
        assert result.media_type == "image/png"
        assert result.original == data
        assert result.original_size == len(data)
        assert result.original_dimensions == (3840, 2160)
        assert result.final_dimensions == (1920, 1080)
        assert result.was_resized
        assert result.quality == pytest.approx(0.51171875)
        assert result.compressed_size == 102344
        assert result.budget_met is True
        assert result.compressed == f"1920x1080@{0.51171875!r}".encode()

    def test_compress_skips_scale_within_bounds(self, fake_codec, id_factory):
        result = compress(
            fake_image(800, 600), "small.jpg", CompressionConfig(), fake_codec, id_factory
        )

        assert fake_codec.scale_calls == []
        assert result.final_dimensions == (800, 600)
        assert not result.was_resized

    def test_compress_uses_config_bounds(self, fake_codec, id_factory):
        config = CompressionConfig(
            max_width=100,
            max_height=100,
            max_bytes=50_000,
            quality_search_iterations=6,
            min_quality=0.2,
            max_quality=0.6,
        )
        result = compress(fake_image(400, 200), "a.gif", config, fake_codec, id_factory)

        assert result.final_dimensions == (100, 50)
        assert 0.2 <= result.quality <= 0.6
        assert result.compressed_size <= 50_000

    def test_compress_reports_unmet_budget(self, fake_codec, id_factory):
        config = CompressionConfig(max_bytes=1, min_quality=0.1)
        result = compress(fake_image(64, 64), "a.png", config, fake_codec, id_factory)

        assert result.budget_met is False
        assert result.quality == 0.1
        assert result.compressed_size == round(200_000 * 0.1)

    def test_declared_media_type_wins(self, fake_codec, id_factory):
        result = compress(
            fake_image(10, 10),
            "upload",
            CompressionConfig(),
            fake_codec,
            id_factory,
            media_type="image/heic",
        )

        assert result.media_type == "image/heic"

    def test_search_limited_to_codec_quality_range(self, id_factory):
        codec = FakeCodec(slope=1, max_quality=0.5)
        result = compress(
            fake_image(10, 10), "a.png", CompressionConfig(), codec, id_factory
        )

        assert result.quality <= 0.5
        assert result.quality == pytest.approx(0.5 - 0.5 / 2**10)

    def test_decode_error_propagates(self, fake_codec, id_factory):
        with pytest.raises(DecodeError):
            compress(b"not an image", "notes.txt", CompressionConfig(), fake_codec)

    def test_default_ids_are_unique(self, fake_codec):
        results = [
            compress(fake_image(10, 10), "a.png", CompressionConfig(), fake_codec)
            for _ in range(5)
        ]

        assert len({r.id for r in results}) == 5


class TestPillowCodec:
    """Pillow 编解码器测试"""

    @pytest.fixture
    def codec(self):
        return PillowCodec()

    def test_encode_produces_webp(self, codec, png_bytes: bytes):
        buffer = codec.decode(png_bytes)
        data, size = codec.encode(buffer, 0.8)

        assert data[:4] == b"RIFF"
        assert data[8:12] == b"WEBP"
        assert size == len(data)

    def test_higher_quality_is_larger(self, codec, noise_bytes: bytes):
        buffer = codec.decode(noise_bytes)
        _, low = codec.encode(buffer, 0.1)
        _, high = codec.encode(buffer, 0.9)

        assert high > low

    def test_decode_garbage_raises(self, codec):
        with pytest.raises(DecodeError):
            codec.decode(b"definitely not an image")

    def test_decode_empty_raises(self, codec):
        with pytest.raises(DecodeError):
            codec.decode(b"")

    def test_decode_truncated_raises(self, codec, png_bytes: bytes):
        with pytest.raises(DecodeError):
            codec.decode(png_bytes[: len(png_bytes) // 2])

    @pytest.mark.parametrize(
        ("mode", "expected"),
        [("RGBA", "RGBA"), ("RGB", "RGB"), ("L", "RGB"), ("LA", "RGBA")],
    )
    def test_modes_prepared_for_webp(self, codec, mode: str, expected: str):
        color = {"RGBA": (255, 0, 0, 128), "LA": (128, 128), "L": 128}.get(
            mode, "red"
        )
        data = make_image_bytes((50, 40), mode=mode, color=color, detailed=False)

        assert codec.decode(data).mode == expected

    def test_scale_uses_requested_size(self, codec, png_bytes: bytes):
        buffer = codec.decode(png_bytes)
        scaled = codec.scale(buffer, 200, 150)

        assert scaled.size == (200, 150)
        assert codec.scale(buffer, *buffer.size) is buffer

    def test_exif_orientation_applied(self, codec):
        img = Image.new("RGB", (40, 20), "blue")
        exif = Image.Exif()
        exif[0x0112] = 6  # 顺时针旋转 90 度
        buffer = BytesIO()
        img.save(buffer, format="JPEG", exif=exif)

        assert codec.decode(buffer.getvalue()).size == (20, 40)

    def test_jpeg_codec_flattens_alpha(self):
        codec = PillowCodec("jpg")
        data = make_image_bytes((60, 60), mode="RGBA", color=(0, 0, 255, 0))
        buffer = codec.decode(data)
        encoded, size = codec.encode(buffer, 0.5)

        assert codec.output_format == "JPEG"
        assert buffer.mode == "RGB"
        assert encoded[:2] == b"\xff\xd8"
        assert size == len(encoded)

    def test_output_format_from_environment(self, monkeypatch):
        monkeypatch.setenv("PIB_OUTPUT_FORMAT", "jpeg")
        reset_config()

        assert PillowCodec().output_format == "JPEG"

    def test_jpeg_reports_quality_actually_encoded(self, noise_bytes: bytes):
        codec = PillowCodec("JPEG")
        result = compress(
            noise_bytes, "noise.png", CompressionConfig(max_bytes=10_000_000), codec
        )

        assert codec.max_quality == 0.95
        assert result.quality <= 0.95
        assert PillowCodec().max_quality == 1.0

    def test_lossless_output_format_rejected(self):
        with pytest.raises(ValidationError):
            PillowCodec("PNG")
