"""
Seam carving for content-aware image resizing.

Find minimum-energy seams by dynamic programming (Avidan & Shamir 2007)
and remove, insert or mark them.
"""

__version__ = "0.1.0"

from .seam import (WeightedCell, PathResult, SeamBuffer, DIRECTIONS,
                   find_seam, find_vert_seam, find_hori_seam, seam_energy)
from .transform import (
    PixelFormat,
    PIXEL_DTYPES,
    remove_path, remove_path_vert, remove_path_hori,
    insert_path, insert_path_vert, insert_path_hori,
    set_path, set_path_vert, set_path_hori,
)
from .energy import (ENERGY_INF, ENERGY_MAX, sobel_energy, scharr_energy,
                     laplacian_energy, quantize_energy, to_grayscale,
                     get_energy_function)
from .carving import carve_image, grow_image, resize_image, draw_seams

__all__ = [
    'WeightedCell',
    'PathResult',
    'SeamBuffer',
    'DIRECTIONS',
    'find_seam',
    'find_vert_seam',
    'find_hori_seam',
    'seam_energy',
    'PixelFormat',
    'PIXEL_DTYPES',
    'remove_path',
    'remove_path_vert',
    'remove_path_hori',
    'insert_path',
    'insert_path_vert',
    'insert_path_hori',
    'set_path',
    'set_path_vert',
    'set_path_hori',
    'ENERGY_INF',
    'ENERGY_MAX',
    'sobel_energy',
    'scharr_energy',
    'laplacian_energy',
    'quantize_energy',
    'to_grayscale',
    'get_energy_function',
    'carve_image',
    'grow_image',
    'resize_image',
    'draw_seams',
]
