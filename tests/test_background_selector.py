"""
背景色選擇測試
"""

import numpy as np
import pytest

from alphakey.data_model import MAGENTA, ColorRGB, SelectionMethod
from alphakey.features.chroma_key import select_background_color
from alphakey.features.chroma_key.background_selector import (
    build_color_histogram,
    find_histogram_color,
    hue_tolerance_for,
)

from .fixtures.synthetic.generate_test_images import make_solid_rgba


def _scattered_rgba(size: int = 40) -> np.ndarray:
    """每個 bucket 都遠低於 5% 面積的漸層圖"""
    rgba = np.zeros((size, size, 4), dtype=np.uint8)
    ys, xs = np.mgrid[0:size, 0:size]
    rgba[:, :, 0] = (xs * 6) % 256
    rgba[:, :, 1] = (ys * 6) % 256
    rgba[:, :, 2] = 128
    rgba[:, :, 3] = 255
    return rgba


def _with_corners(rgba: np.ndarray, corners: list[tuple[int, int, int]]) -> np.ndarray:
    rgba[0, 0, :3] = corners[0]
    rgba[0, -1, :3] = corners[1]
    rgba[-1, 0, :3] = corners[2]
    rgba[-1, -1, :3] = corners[3]
    return rgba


class TestHistogram:
    """測試直方圖"""

    @pytest.mark.unit
    def test_bucket_count(self) -> None:
        counts = build_color_histogram(make_solid_rgba((255, 0, 255), (4, 4)))
        assert counts.shape == (4096,)
        assert counts.sum() == 16
        # (15 << 8) | (0 << 4) | 15
        assert counts[0xF0F] == 16

    @pytest.mark.unit
    def test_hue_tolerance(self) -> None:
        assert hue_tolerance_for(255) == pytest.approx(120)
        assert hue_tolerance_for(30) == pytest.approx(30 / 255 * 120)

    @pytest.mark.unit
    def test_drifted_background_uses_bucket_center(self) -> None:
        rgba = make_solid_rgba((250, 10, 240), (32, 32))
        selection = select_background_color(rgba, MAGENTA, 30)

        assert selection.method == SelectionMethod.HISTOGRAM
        assert selection.color.as_tuple() == (248, 8, 248)
        assert selection.histogram_color == selection.color
        assert selection.requested == MAGENTA

    @pytest.mark.unit
    def test_larger_area_wins_tie(self) -> None:
        """色相距離相同時取像素數較多的 bucket"""
        rgba = make_solid_rgba((250, 5, 250), (10, 10))
        rgba[:4, :, :3] = (200, 5, 200)  # 40%
        assert find_histogram_color(rgba[:, :, :3], 300.0, 30) == ColorRGB(
            r=248, g=8, b=248
        )

        rgba = make_solid_rgba((200, 5, 200), (10, 10))
        rgba[:4, :, :3] = (250, 5, 250)
        assert find_histogram_color(rgba[:, :, :3], 300.0, 30) == ColorRGB(
            r=200, g=8, b=200
        )

    @pytest.mark.unit
    def test_closer_hue_beats_larger_area(self) -> None:
        rgba = make_solid_rgba((255, 0, 160), (10, 10))  # hue ≈ 320
        rgba[:3, :, :3] = (250, 5, 250)  # hue 300，30%
        color = find_histogram_color(rgba[:, :, :3], 300.0, 60)
        assert color == ColorRGB(r=248, g=8, b=248)

    @pytest.mark.unit
    def test_small_buckets_ignored(self) -> None:
        rgba = _scattered_rgba()
        assert find_histogram_color(rgba[:, :, :3], 300.0, 255) is None


class TestHueTolerance:
    """測試色相容差的影響"""

    @pytest.mark.unit
    def test_out_of_tolerance_falls_back_to_corner(self) -> None:
        # bucket 中心 (248, 8, 168) 色相 320，與 300 相差 20 度
        rgba = make_solid_rgba((255, 0, 160), (16, 16))

        strict = select_background_color(rgba, MAGENTA, 30)  # 容差 ≈ 14.1 度
        assert strict.method == SelectionMethod.CORNER
        assert strict.histogram_color is None
        assert strict.color.as_tuple() == (255, 0, 160)

        loose = select_background_color(rgba, MAGENTA, 60)  # 容差 ≈ 28.2 度
        assert loose.method == SelectionMethod.HISTOGRAM
        assert loose.color.as_tuple() == (248, 8, 168)


class TestCornerFallback:
    """測試四角取樣備援"""

    CORNERS = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0)]

    @pytest.mark.unit
    def test_corner_order_recorded(self) -> None:
        rgba = _with_corners(_scattered_rgba(), self.CORNERS)
        selection = select_background_color(rgba, MAGENTA, 30)

        assert [c.as_tuple() for c in selection.corner_colors] == self.CORNERS

    @pytest.mark.unit
    def test_tie_uses_enumeration_order(self) -> None:
        """紅(0°)與藍(240°)距 300° 都是 60 度，左上優先"""
        rgba = _with_corners(_scattered_rgba(), self.CORNERS)
        selection = select_background_color(rgba, MAGENTA, 30)

        assert selection.method == SelectionMethod.CORNER
        assert selection.color.as_tuple() == (255, 0, 0)

    @pytest.mark.unit
    def test_closest_corner(self) -> None:
        rgba = _with_corners(_scattered_rgba(), self.CORNERS)
        selection = select_background_color(rgba, ColorRGB.from_hex("#0000FF"), 30)

        assert selection.color.as_tuple() == (0, 0, 255)

    @pytest.mark.unit
    def test_corners_recorded_when_histogram_wins(self) -> None:
        rgba = make_solid_rgba((250, 10, 240), (8, 8))
        selection = select_background_color(rgba, MAGENTA, 30)

        assert selection.method == SelectionMethod.HISTOGRAM
        assert all(c.as_tuple() == (250, 10, 240) for c in selection.corner_colors)

    @pytest.mark.unit
    def test_single_pixel_image(self) -> None:
        rgba = make_solid_rgba((10, 20, 30), (1, 1))
        selection = select_background_color(rgba, MAGENTA, 0)
        assert selection.method == SelectionMethod.CORNER
        assert selection.color.as_tuple() == (10, 20, 30)
