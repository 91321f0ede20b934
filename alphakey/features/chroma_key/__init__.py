"""
Chroma key 去背模組

依流程順序提供各處理階段
"""

from .alpha_despill import apply_alpha_weighted_despill
from .background_selector import select_background_color
from .boundary_despill import apply_boundary_despill
from .edge_refiner import refine_edges
from .keyer import apply_alpha_key, despill_threshold_for, rgb_threshold_for
from .speckle import remove_speckles


__all__ = [
    "select_background_color",
    "apply_alpha_key",
    "rgb_threshold_for",
    "despill_threshold_for",
    "refine_edges",
    "apply_boundary_despill",
    "apply_alpha_weighted_despill",
    "remove_speckles",
]
