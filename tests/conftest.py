"""
Pytest 配置和共用 fixtures
"""

import numpy as np
import pytest
from PIL import Image, ImageDraw

from alphakey.data_model import RasterImage

from .fixtures.synthetic.generate_test_images import RED_RGB, make_disk_image


@pytest.fixture
def magenta_disk_image() -> Image.Image:
    """64x64 洋紅背景 + 置中 20x20 紅色實心圓"""
    return make_disk_image()


@pytest.fixture
def magenta_disk_raster(magenta_disk_image: Image.Image) -> RasterImage:
    """同上，轉為 RGBA 點陣"""
    return RasterImage.from_pil(magenta_disk_image.convert("RGBA"))


@pytest.fixture
def disk_mask(magenta_disk_image: Image.Image) -> np.ndarray:
    """紅色圓形所在的像素遮罩"""
    rgb = np.array(magenta_disk_image)
    return np.all(rgb == RED_RGB, axis=2)


@pytest.fixture
def greenscreen_raster() -> RasterImage:
    """
    生成綠幕測試圖片

    模擬：背景色偏離純綠的綠幕，中央為紅色方塊
    """
    image = Image.new("RGB", (48, 48), color=(20, 230, 30))
    draw = ImageDraw.Draw(image)
    draw.rectangle([(16, 16), (31, 31)], fill=(200, 50, 50))
    return RasterImage.from_pil(image)
