"""Shared test fixtures for the seamcarve test suite."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import torch
import pytest


@pytest.fixture
def diagonal_energy():
    """5x5 map: zero strip on the diagonal (1,1)..(3,3), 100 elsewhere."""
    energy = torch.full((5, 5), 100, dtype=torch.int16)
    for i in range(1, 4):
        energy[i, i] = 0
    return energy


@pytest.fixture
def rgb_image():
    """4x4, 3-channel uint8 image where every pixel value is unique."""
    return torch.arange(3 * 4 * 4, dtype=torch.uint8).reshape(3, 4, 4)


def make_column_image(H, W, channels=3, dtype=torch.uint8):
    """Every pixel holds its column index (times 10 in later channels)."""
    cols = torch.arange(W).unsqueeze(0).expand(H, W)
    if channels == 0:
        return cols.to(dtype).clone()
    return torch.stack([cols * (1 + 10 * c) for c in range(channels)]).to(dtype)


def make_edge_image(H, W, edge_col, channels=3):
    """Float image, dark left of ``edge_col`` and bright from it on."""
    image = torch.zeros(channels, H, W)
    image[:, :, edge_col:] = 1.0
    return image


def path_sum(energy, path, direction='vertical'):
    """Sum of energy along a path, computed by plain Python iteration."""
    total = 0
    for level, coord in enumerate(path.tolist()):
        if direction == 'vertical':
            total += int(energy[level, coord])
        else:
            total += int(energy[coord, level])
    return total
