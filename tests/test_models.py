"""
資料模型測試
"""

import numpy as np
import pytest
from PIL import Image
from pydantic import ValidationError

from alphakey.common import FringeMode, RasterIntegrityError
from alphakey.data_model import (
    MAGENTA,
    ColorRGB,
    KeySelection,
    PipelineOptions,
    RasterImage,
    SelectionMethod,
)


class TestRasterImage:
    """測試點陣影像驗證與轉換"""

    @pytest.mark.unit
    def test_from_bytes(self) -> None:
        data = bytes(range(2 * 3 * 4))
        image = RasterImage.from_bytes(data, width=3, height=2, channels=4)

        assert (image.width, image.height, image.channels) == (3, 2, 4)
        assert image.has_alpha
        assert image.to_bytes() == data

    @pytest.mark.unit
    def test_from_bytes_wrong_length(self) -> None:
        with pytest.raises(RasterIntegrityError, match="does not match"):
            RasterImage.from_bytes(b"\x00" * 10, width=2, height=2, channels=3)

    @pytest.mark.unit
    def test_from_bytes_unsupported_channels(self) -> None:
        with pytest.raises(RasterIntegrityError):
            RasterImage.from_bytes(b"\x00" * 8, width=2, height=2, channels=2)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "pixels",
        [
            np.zeros((2, 2, 5), dtype=np.uint8),
            np.zeros((2, 2), dtype=np.uint8),
            np.zeros((2, 2, 4), dtype=np.float32),
            np.zeros((0, 2, 4), dtype=np.uint8),
        ],
    )
    def test_invalid_arrays(self, pixels: np.ndarray) -> None:
        with pytest.raises(RasterIntegrityError):
            RasterImage(pixels)

    @pytest.mark.unit
    def test_integrity_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            RasterImage(np.zeros((1, 1, 2), dtype=np.uint8))

    @pytest.mark.unit
    def test_ensure_alpha(self) -> None:
        rgb = RasterImage(np.full((2, 2, 3), 7, dtype=np.uint8))
        rgba = rgb.ensure_alpha()

        assert rgba is not rgb
        assert rgba.channels == 4  # noqa: PLR2004
        assert np.all(rgba.alpha == 255)
        assert rgba.ensure_alpha() is rgba

    @pytest.mark.unit
    def test_pil_round_trip(self) -> None:
        source = Image.new("LA", (4, 3), (128, 200))
        image = RasterImage.from_pil(source)

        assert image.channels == 4  # noqa: PLR2004
        assert image.to_pil().mode == "RGBA"
        assert image.to_pil().size == (4, 3)

    @pytest.mark.unit
    def test_copy_is_independent(self) -> None:
        image = RasterImage(np.zeros((2, 2, 4), dtype=np.uint8))
        clone = image.copy()
        clone.pixels[0, 0, 0] = 9

        assert image.pixels[0, 0, 0] == 0


class TestPipelineOptions:
    """測試流程選項"""

    @pytest.mark.unit
    def test_defaults(self) -> None:
        options = PipelineOptions()

        assert options.key_color is None
        assert options.requested_color == MAGENTA
        assert options.tolerance == 30  # noqa: PLR2004
        assert options.fringe_mode == FringeMode.AUTO

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["auto", "AUTO", None])
    def test_auto_key_color(self, value: str | None) -> None:
        assert PipelineOptions(key_color=value).requested_color == MAGENTA

    @pytest.mark.unit
    def test_hex_key_color(self) -> None:
        options = PipelineOptions(key_color="#0f0")
        assert options.requested_color == ColorRGB(r=0, g=255, b=0)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "kwargs",
        [{"key_color": "#GG0000"}, {"tolerance": 256}, {"fringe_mode": "soft"}],
    )
    def test_invalid_values(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ValidationError):
            PipelineOptions(**kwargs)  # type: ignore[arg-type]

    @pytest.mark.unit
    def test_target_size_falls_back_to_image(self) -> None:
        options = PipelineOptions(target_width=200)
        assert options.target_size(64, 32) == (200, 32)


class TestKeySelection:
    """測試除錯資訊轉換"""

    @pytest.mark.unit
    def test_to_diagnostics(self) -> None:
        corners = (
            ColorRGB(r=255, g=0, b=0),
            ColorRGB(r=0, g=255, b=0),
            ColorRGB(r=0, g=0, b=255),
            ColorRGB(r=255, g=255, b=0),
        )
        selection = KeySelection(
            color=corners[2],
            method=SelectionMethod.CORNER,
            requested=MAGENTA,
            corner_colors=corners,
        )

        diagnostics = selection.to_diagnostics()

        assert diagnostics.selected_color_hex == "#0000FF"
        assert diagnostics.selection_method == SelectionMethod.CORNER
        assert diagnostics.requested_color_hex == "#FF00FF"
        assert diagnostics.corner_colors_hex == (
            "#FF0000",
            "#00FF00",
            "#0000FF",
            "#FFFF00",
        )
