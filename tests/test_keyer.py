"""
Alpha key 與第一次去溢色測試
"""

import math

import numpy as np
import pytest

from alphakey.common import get_despiller
from alphakey.data_model import MAGENTA
from alphakey.features.chroma_key import (
    apply_alpha_key,
    despill_threshold_for,
    rgb_threshold_for,
)

from .fixtures.synthetic.generate_test_images import make_solid_rgba


MAGENTA_DESPILL = get_despiller("magenta")


def _row(*colors: tuple[int, int, int]) -> np.ndarray:
    rgba = np.full((1, len(colors), 4), 255, dtype=np.uint8)
    rgba[0, :, :3] = colors
    return rgba


class TestThresholds:
    """測試距離閾值"""

    @pytest.mark.unit
    def test_tolerance_30(self) -> None:
        assert rgb_threshold_for(30) == pytest.approx(30 * math.sqrt(2))
        assert rgb_threshold_for(30) == pytest.approx(42.43, abs=0.01)
        assert despill_threshold_for(30) == pytest.approx(76.37, abs=0.01)


class TestApplyAlphaKey:
    """測試逐像素分類"""

    @pytest.mark.unit
    def test_exact_key_becomes_transparent(self) -> None:
        rgba = _row((255, 0, 255))
        apply_alpha_key(rgba, MAGENTA, 30, MAGENTA_DESPILL)

        assert rgba[0, 0, 3] == 0
        np.testing.assert_array_equal(rgba[0, 0, :3], [255, 0, 255])

    @pytest.mark.unit
    def test_despill_zone_stays_opaque(self) -> None:
        """距離 60 位於 42.4 與 76.4 之間：保持不透明，R/B 向 G 壓低"""
        rgba = _row((255, 60, 255))
        apply_alpha_key(rgba, MAGENTA, 30, MAGENTA_DESPILL)

        r, g, b, a = (int(v) for v in rgba[0, 0])
        assert a == 255
        assert g == 60
        assert r == b
        # spill ≈ 0.482 → 255 - 0.482 × 195 ≈ 161
        assert 159 <= r <= 161

    @pytest.mark.unit
    def test_far_pixels_unchanged(self) -> None:
        rgba = _row((0, 0, 0), (255, 0, 0), (10, 200, 10))
        original = rgba.copy()
        apply_alpha_key(rgba, MAGENTA, 30, MAGENTA_DESPILL)

        np.testing.assert_array_equal(rgba, original)

    @pytest.mark.unit
    def test_spill_strength_decays_with_distance(self) -> None:
        rgba = _row((255, 50, 255), (255, 70, 255))
        apply_alpha_key(rgba, MAGENTA, 30, MAGENTA_DESPILL)

        near_drop = 255 - int(rgba[0, 0, 0])
        far_drop = 255 - int(rgba[0, 1, 0])
        assert near_drop > far_drop > 0

    @pytest.mark.unit
    def test_zero_tolerance_only_exact_match(self) -> None:
        rgba = _row((255, 0, 255), (255, 1, 255))
        apply_alpha_key(rgba, MAGENTA, 0, MAGENTA_DESPILL)

        assert rgba[0, 0, 3] == 0
        np.testing.assert_array_equal(rgba[0, 1], [255, 1, 255, 255])

    @pytest.mark.unit
    def test_idempotent_on_transparent_image(self) -> None:
        """全透明影像重複執行不會再改變"""
        rgba = np.zeros((4, 4, 4), dtype=np.uint8)
        rgba[:, :2, :3] = (255, 0, 255)
        rgba[:, 2:, :3] = (255, 60, 255)
        original = rgba.copy()

        apply_alpha_key(rgba, MAGENTA, 30, MAGENTA_DESPILL)
        np.testing.assert_array_equal(rgba, original)

    @pytest.mark.unit
    def test_alpha_only_written_as_zero(self) -> None:
        rgba = make_solid_rgba((255, 0, 255), (3, 3), alpha=200)
        rgba[1, 1, :3] = (0, 0, 0)
        apply_alpha_key(rgba, MAGENTA, 30, MAGENTA_DESPILL)

        assert rgba[1, 1, 3] == 200
        assert np.count_nonzero(rgba[:, :, 3]) == 1
