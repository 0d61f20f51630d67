"""
High-level carving functions that drive search and seam application.
"""

import logging
import operator

import torch

from .energy import EnergyFunction, sobel_energy
from .seam import Comparator, SeamBuffer, find_seam
from .transform import insert_path, remove_path, set_path

logger = logging.getLogger(__name__)


def _seam_axes(image: torch.Tensor, direction: str):
    """(levels, extent) of seams of ``direction`` through ``image``."""
    if image.dim() not in (2, 3):
        raise ValueError(f"Image must be (C, H, W) or (H, W), got shape {tuple(image.shape)}")
    H, W = image.shape[-2:]
    if direction == 'vertical':
        return H, W
    elif direction == 'horizontal':
        return W, H
    else:
        raise ValueError(f"Invalid direction: {direction}")


def _check_seam_count(image: torch.Tensor, n_seams: int, direction: str):
    levels, extent = _seam_axes(image, direction)
    if n_seams < 0:
        raise ValueError(f"n_seams must be non-negative, got {n_seams}")
    # Every search needs three coordinates across, so two always remain.
    if n_seams > extent - 2:
        raise ValueError(
            f"Cannot find {n_seams} {direction} seams in an image {extent} pixels across "
            f"(at most {max(extent - 2, 0)})")
    return levels, extent


def carve_image(image: torch.Tensor, n_seams: int, direction: str = 'vertical',
                energy_fn: EnergyFunction = sobel_energy,
                cmp: Comparator = operator.lt) -> torch.Tensor:
    """
    Shrink an image by removing seams one at a time.

    Energy is recomputed after every removal. One DP table sized for the
    input is reused by every search.

    Args:
        image: Image tensor (C, H, W) or (H, W)
        n_seams: Number of seams to remove
        direction: 'vertical' (narrower) or 'horizontal' (shorter)
        energy_fn: Maps an image to an integer energy map (H, W)
        cmp: Seam ordering passed to the search

    Returns:
        Carved image
    """
    levels, extent = _check_seam_count(image, n_seams, direction)
    carved = image.clone()
    if n_seams == 0:
        return carved

    buffer = SeamBuffer(levels, extent, device=image.device)
    for i in range(n_seams):
        seam = find_seam(energy_fn(carved), direction, cmp=cmp, buffer=buffer)
        carved = remove_path(carved, seam, direction)
        logger.debug("Removed %s seam %d/%d (energy %d), size %s",
                     direction, i + 1, n_seams, seam.total_energy, tuple(carved.shape))

    return carved


def grow_image(image: torch.Tensor, n_seams: int, direction: str = 'vertical',
               energy_fn: EnergyFunction = sobel_energy) -> torch.Tensor:
    """
    Enlarge an image by inserting seams.

    Inserting the best seam repeatedly would pick the same spot every time,
    so the n best seams are found first by carving a working copy, then all
    of them are inserted into the original.

    Args:
        image: Image tensor (C, H, W) or (H, W)
        n_seams: Number of seams to insert
        direction: 'vertical' (wider) or 'horizontal' (taller)
        energy_fn: Maps an image to an integer energy map (H, W)

    Returns:
        Enlarged image
    """
    levels, extent = _check_seam_count(image, n_seams, direction)
    if n_seams == 0:
        return image.clone()

    H, W = image.shape[-2:]
    device = image.device
    along = torch.arange(levels, device=device)

    # Original perpendicular coordinate of every pixel of the working copy.
    if direction == 'vertical':
        index_map = torch.arange(W, device=device).expand(H, W).clone()
    else:
        index_map = torch.arange(H, device=device).unsqueeze(1).expand(H, W).clone()

    buffer = SeamBuffer(levels, extent, device=device)
    work = image
    seams = []
    for i in range(n_seams):
        seam = find_seam(energy_fn(work), direction, buffer=buffer)
        if direction == 'vertical':
            seams.append(index_map[along, seam.path])
        else:
            seams.append(index_map[seam.path, along])
        work = remove_path(work, seam, direction)
        index_map = remove_path(index_map, seam, direction)

    grown = image
    for i, seam in enumerate(seams):
        grown = insert_path(grown, seam, direction)
        for j in range(i + 1, n_seams):
            seams[j] = torch.where(seams[j] > seam, seams[j] + 1, seams[j])
        logger.debug("Inserted %s seam %d/%d, size %s",
                     direction, i + 1, n_seams, tuple(grown.shape))

    return grown


def resize_image(image: torch.Tensor, height: int, width: int,
                 energy_fn: EnergyFunction = sobel_energy) -> torch.Tensor:
    """
    Content-aware resize to (height, width): columns first, then rows.
    """
    if height < 1 or width < 1:
        raise ValueError(f"Target size must be positive, got {height}x{width}")
    H, W = _seam_axes(image, 'vertical')

    result = image.clone()
    if width < W:
        result = carve_image(result, W - width, 'vertical', energy_fn)
    elif width > W:
        result = grow_image(result, width - W, 'vertical', energy_fn)

    if height < H:
        result = carve_image(result, H - height, 'horizontal', energy_fn)
    elif height > H:
        result = grow_image(result, height - H, 'horizontal', energy_fn)

    return result


def draw_seams(image: torch.Tensor, n_vertical: int, n_horizontal: int, color,
               energy_fn: EnergyFunction = sobel_energy) -> torch.Tensor:
    """
    Render one frame of an interactive carving display.

    Removes n_vertical columns and n_horizontal rows, then paints the next
    vertical and horizontal seam of the result with ``color``. The input
    image is left untouched.
    """
    frame = carve_image(image, n_vertical, 'vertical', energy_fn)
    frame = carve_image(frame, n_horizontal, 'horizontal', energy_fn)

    energy = energy_fn(frame)
    vertical = find_seam(energy, 'vertical')
    horizontal = find_seam(energy, 'horizontal')
    set_path(frame, vertical, color, 'vertical')
    set_path(frame, horizontal, color, 'horizontal')
    return frame
