"""
Applying a seam to an image: remove it, insert it, or mark it.

Images are (C, H, W) or (H, W) tensors. A vertical path has one column index
per row; a horizontal path has one row index per column. The horizontal
operations run the vertical ones on the transposed image.
"""

from typing import NamedTuple, Sequence, Union

import torch

from .seam import PathResult

PIXEL_DTYPES = (
    torch.uint8, torch.int8, torch.int16, torch.int32, torch.int64,
    torch.float16, torch.float32, torch.float64,
)

PathLike = Union[PathResult, torch.Tensor, Sequence[int]]


class PixelFormat(NamedTuple):
    """Channel count and element type of an image buffer."""
    channels: int
    dtype: torch.dtype

    @classmethod
    def of(cls, image: torch.Tensor) -> 'PixelFormat':
        channels = 1 if image.dim() == 2 else image.shape[0]
        return cls(channels, image.dtype)


def _as_channels_first(image: torch.Tensor):
    if image.dim() == 2:
        return image.unsqueeze(0), True
    if image.dim() == 3:
        return image, False
    raise ValueError(f"Image must be (C, H, W) or (H, W), got shape {tuple(image.shape)}")


def _check_image(image: torch.Tensor):
    if image.dtype not in PIXEL_DTYPES:
        raise ValueError(f"Unsupported pixel type: {image.dtype}")
    return _as_channels_first(image)


def _as_path(path: PathLike, levels: int, device) -> torch.Tensor:
    if isinstance(path, PathResult):
        path = path.path
    path = torch.as_tensor(path, device=device)
    if path.numel() == 0:
        path = path.long()
    if path.dtype == torch.bool or path.dtype.is_floating_point:
        raise ValueError(f"Seam path must hold integer indices, got {path.dtype}")
    if path.dim() != 1:
        raise ValueError(f"Seam path must be 1D, got shape {tuple(path.shape)}")
    if path.shape[0] != levels:
        raise ValueError(f"Seam path has {path.shape[0]} entries, image needs {levels}")
    return path.long()


def _check_range(path: torch.Tensor, low: int, high: int, operation: str):
    if path.numel() == 0:
        return
    lo, hi = int(path.min()), int(path.max())
    if lo < low or hi > high:
        raise ValueError(
            f"Cannot {operation} seam: path spans [{lo}, {hi}], allowed range is [{low}, {high}]")


def _blend(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """Per-channel average of two pixels; integer types round down."""
    if a.dtype.is_floating_point:
        return (a + b) / 2
    # floor((a + b) / 2) without forming a + b
    return (a >> 1) + (b >> 1) + (a & b & 1)


# ---------------------------------------------------------------------------
# Vertical kernels on (C, H, W)
# ---------------------------------------------------------------------------

def _remove_columns(image: torch.Tensor, path: torch.Tensor) -> torch.Tensor:
    C, H, W = image.shape
    cols = torch.arange(W - 1, device=image.device).expand(H, W - 1)
    src = cols + (cols >= path.unsqueeze(1)).long()
    return image.gather(2, src.unsqueeze(0).expand(C, H, W - 1))


def _insert_columns(image: torch.Tensor, path: torch.Tensor) -> torch.Tensor:
    C, H, W = image.shape
    p = path.unsqueeze(1)
    cols = torch.arange(W + 1, device=image.device).expand(H, W + 1)
    src = torch.where(cols > p, cols - 1, cols)
    grown = image.gather(2, src.unsqueeze(0).expand(C, H, W + 1))

    before = image.gather(2, (p - 1).unsqueeze(0).expand(C, H, 1))
    after = image.gather(2, p.unsqueeze(0).expand(C, H, 1))
    new_pixels = _blend(before, after)

    return torch.where((cols == p).unsqueeze(0), new_pixels, grown)


def _mark_columns(image: torch.Tensor, path: torch.Tensor, color: torch.Tensor):
    rows = torch.arange(image.shape[1], device=image.device)
    image[:, rows, path] = color.unsqueeze(1)


def _as_color(color, fmt: PixelFormat, device) -> torch.Tensor:
    color = torch.as_tensor(color, device=device).reshape(-1)
    if not fmt.dtype.is_floating_point and color.numel() > 0:
        info = torch.iinfo(fmt.dtype)
        lo, hi = color.min().item(), color.max().item()
        if lo < info.min or hi > info.max:
            raise ValueError(
                f"Color values [{lo}, {hi}] do not fit {fmt.dtype} [{info.min}, {info.max}]")
    color = color.to(fmt.dtype)
    if color.shape[0] != fmt.channels:
        raise ValueError(
            f"Color has {color.shape[0]} values, image has {fmt.channels} channels")
    return color


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------

def remove_path_vert(image: torch.Tensor, path: PathLike) -> torch.Tensor:
    """
    Remove a vertical seam.

    Args:
        image: Image tensor (C, H, W) or (H, W)
        path: Column index per row

    Returns:
        New image with one column fewer, same dtype and layout
    """
    image3, squeeze = _check_image(image)
    C, H, W = image3.shape
    path = _as_path(path, H, image.device)
    _check_range(path, 0, W - 1, 'remove')

    carved = _remove_columns(image3, path)
    return carved.squeeze(0) if squeeze else carved


def remove_path_hori(image: torch.Tensor, path: PathLike) -> torch.Tensor:
    """
    Remove a horizontal seam.

    Args:
        image: Image tensor (C, H, W) or (H, W)
        path: Row index per column

    Returns:
        New image with one row fewer, same dtype and layout
    """
    image3, squeeze = _check_image(image)
    C, H, W = image3.shape
    path = _as_path(path, W, image.device)
    _check_range(path, 0, H - 1, 'remove')

    carved = _remove_columns(image3.transpose(1, 2), path).transpose(1, 2).contiguous()
    return carved.squeeze(0) if squeeze else carved


def insert_path_vert(image: torch.Tensor, path: PathLike) -> torch.Tensor:
    """
    Insert a vertical seam.

    The new pixel in row i sits at column path[i], between the source pixels
    path[i] - 1 and path[i], and is their average. Entries must therefore lie
    in [1, W - 1].
    """
    image3, squeeze = _check_image(image)
    C, H, W = image3.shape
    path = _as_path(path, H, image.device)
    _check_range(path, 1, W - 1, 'insert')

    grown = _insert_columns(image3, path)
    return grown.squeeze(0) if squeeze else grown


def insert_path_hori(image: torch.Tensor, path: PathLike) -> torch.Tensor:
    """Insert a horizontal seam; entries must lie in [1, H - 1]."""
    image3, squeeze = _check_image(image)
    C, H, W = image3.shape
    path = _as_path(path, W, image.device)
    _check_range(path, 1, H - 1, 'insert')

    grown = _insert_columns(image3.transpose(1, 2), path).transpose(1, 2).contiguous()
    return grown.squeeze(0) if squeeze else grown


def set_path_vert(image: torch.Tensor, path: PathLike, color) -> torch.Tensor:
    """Paint a vertical seam with ``color`` (one value per channel), in place."""
    image3, _ = _check_image(image)
    C, H, W = image3.shape
    path = _as_path(path, H, image.device)
    _check_range(path, 0, W - 1, 'mark')
    color = _as_color(color, PixelFormat.of(image), image.device)

    _mark_columns(image3, path, color)
    return image


def set_path_hori(image: torch.Tensor, path: PathLike, color) -> torch.Tensor:
    """Paint a horizontal seam with ``color`` (one value per channel), in place."""
    image3, _ = _check_image(image)
    C, H, W = image3.shape
    path = _as_path(path, W, image.device)
    _check_range(path, 0, H - 1, 'mark')
    color = _as_color(color, PixelFormat.of(image), image.device)

    _mark_columns(image3.transpose(1, 2), path, color)
    return image


def remove_path(image: torch.Tensor, path: PathLike,
                direction: str = 'vertical') -> torch.Tensor:
    if direction == 'vertical':
        return remove_path_vert(image, path)
    elif direction == 'horizontal':
        return remove_path_hori(image, path)
    else:
        raise ValueError(f"Invalid direction: {direction}")


def insert_path(image: torch.Tensor, path: PathLike,
                direction: str = 'vertical') -> torch.Tensor:
    if direction == 'vertical':
        return insert_path_vert(image, path)
    elif direction == 'horizontal':
        return insert_path_hori(image, path)
    else:
        raise ValueError(f"Invalid direction: {direction}")


def set_path(image: torch.Tensor, path: PathLike, color,
             direction: str = 'vertical') -> torch.Tensor:
    if direction == 'vertical':
        return set_path_vert(image, path, color)
    elif direction == 'horizontal':
        return set_path_hori(image, path, color)
    else:
        raise ValueError(f"Invalid direction: {direction}")
