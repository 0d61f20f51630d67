"""
Energy functions for seam carving.

The energy function determines which pixels are "important". Low-energy
seams are preferred for removal.

All functions here return bounded integer maps (torch.int16, values in
[0, ENERGY_MAX]) so that the accumulated cost of a seam stays well inside
the search's int64 accumulator.
"""

from typing import Callable, Dict

import torch
import torch.nn.functional as F

# Reserved "infinite" cost; real energies stay strictly below it.
ENERGY_INF = 30000
ENERGY_MAX = ENERGY_INF - 1

EnergyFunction = Callable[[torch.Tensor], torch.Tensor]


def to_grayscale(image: torch.Tensor) -> torch.Tensor:
    """
    Convert an image to a float32 grayscale map on a 0-255 scale.

    Floating-point images are assumed to hold values in [0, 1]; integer
    images are taken as-is.

    Args:
        image: RGB image tensor (3, H, W), single channel (1, H, W) or (H, W)

    Returns:
        Grayscale map (H, W)
    """
    scale = 255.0 if image.dtype.is_floating_point else 1.0
    image = image.to(torch.float32) * scale

    if image.dim() == 2:
        return image
    elif image.dim() == 3:
        if image.shape[0] == 3:
            return 0.299 * image[0] + 0.587 * image[1] + 0.114 * image[2]
        elif image.shape[0] == 1:
            return image[0]
        return image.mean(dim=0)
    raise ValueError(f"Image must be (C, H, W) or (H, W), got shape {tuple(image.shape)}")


def _filter(gray: torch.Tensor, kernel) -> torch.Tensor:
    kernel = torch.tensor(kernel, dtype=gray.dtype, device=gray.device).view(1, 1, 3, 3)
    padded = F.pad(gray.view(1, 1, *gray.shape), (1, 1, 1, 1), mode='replicate')
    return F.conv2d(padded, kernel).view(*gray.shape)


def _to_energy(magnitude: torch.Tensor) -> torch.Tensor:
    return magnitude.round().clamp(0, ENERGY_MAX).to(torch.int16)


def sobel_energy(image: torch.Tensor) -> torch.Tensor:
    """
    L1 gradient magnitude with Sobel filters (Avidan & Shamir 2007):
    E(i,j) = |dI/dx| + |dI/dy|

    Args:
        image: Image tensor (C, H, W) or (H, W)

    Returns:
        Energy map (H, W), torch.int16
    """
    gray = to_grayscale(image)
    grad_x = _filter(gray, [[-1, 0, 1],
                            [-2, 0, 2],
                            [-1, 0, 1]])
    grad_y = _filter(gray, [[-1, -2, -1],
                            [ 0,  0,  0],
                            [ 1,  2,  1]])
    return _to_energy(grad_x.abs() + grad_y.abs())


def scharr_energy(image: torch.Tensor) -> torch.Tensor:
    """Like sobel_energy, with the more rotation-invariant Scharr kernels."""
    gray = to_grayscale(image)
    grad_x = _filter(gray, [[ -3, 0,  3],
                            [-10, 0, 10],
                            [ -3, 0,  3]])
    grad_y = _filter(gray, [[-3, -10, -3],
                            [ 0,   0,  0],
                            [ 3,  10,  3]])
    return _to_energy(grad_x.abs() + grad_y.abs())


def laplacian_energy(image: torch.Tensor) -> torch.Tensor:
    """Absolute response of the 4-neighbour Laplacian."""
    gray = to_grayscale(image)
    response = _filter(gray, [[0,  1, 0],
                              [1, -4, 1],
                              [0,  1, 0]])
    return _to_energy(response.abs())


def quantize_energy(energy: torch.Tensor, max_value: int = ENERGY_MAX) -> torch.Tensor:
    """Remap an arbitrary energy map to integers in [0, max_value].

    Monotonic (up to rounding), so low-energy regions stay low-energy.
    A constant map becomes all zeros.

    Args:
        energy: Energy map (H, W), any real dtype
        max_value: Largest output value

    Returns:
        Integer energy map (H, W): torch.int16 if max_value fits, else torch.int32
    """
    if max_value < 1:
        raise ValueError(f"max_value must be positive, got {max_value}")
    energy = energy.to(torch.float64)
    e_min = energy.min()
    span = energy.max() - e_min
    if span <= 0:
        scaled = torch.zeros_like(energy)
    else:
        scaled = (energy - e_min) / span * max_value
    dtype = torch.int16 if max_value <= torch.iinfo(torch.int16).max else torch.int32
    return scaled.round().to(dtype)


ENERGY_FUNCTIONS: Dict[str, EnergyFunction] = {
    'sobel': sobel_energy,
    'scharr': scharr_energy,
    'laplacian': laplacian_energy,
}


def get_energy_function(name: str) -> EnergyFunction:
    try:
        return ENERGY_FUNCTIONS[name]
    except KeyError:
        raise ValueError(
            f"Unknown energy function: {name!r}. "
            f"Choose from {', '.join(sorted(ENERGY_FUNCTIONS))}") from None
