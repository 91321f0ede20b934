"""
錯誤類型模組

定義去背流程中會向呼叫端拋出的例外
"""


class AlphaKeyError(Exception):
    """所有 alphakey 例外的基底類別"""


class RasterIntegrityError(AlphaKeyError, ValueError):
    """點陣資料與宣告的尺寸或通道數不一致（致命錯誤，不處理任何像素）"""


class ColorParseError(AlphaKeyError, ValueError):
    """無法解析的色彩字串"""
