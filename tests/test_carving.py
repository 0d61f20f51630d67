"""
Tests for the carving drivers: shrinking, growing, resizing and seam display.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import logging
import operator

import torch
import pytest
from seamcarve.carving import carve_image, grow_image, resize_image, draw_seams
from seamcarve.energy import laplacian_energy

from conftest import make_edge_image


def is_subsequence(short, long):
    it = iter(long)
    return all(any(x == y for y in it) for x in short)


class TestCarveImage:
    def test_reduces_width(self):
        image = torch.rand(3, 20, 30)
        carved = carve_image(image, n_seams=5, direction='vertical')
        assert carved.shape == (3, 20, 25)

    def test_reduces_height(self):
        image = torch.randint(0, 256, (3, 20, 30), dtype=torch.uint8)
        carved = carve_image(image, n_seams=4, direction='horizontal')
        assert carved.shape == (3, 16, 30)
        assert carved.dtype == torch.uint8

    def test_multiple_carves_reduce_correctly(self):
        image = torch.rand(3, 25, 40)
        for n in [1, 5, 15]:
            carved = carve_image(image, n_seams=n)
            assert carved.shape == (3, 25, 40 - n)

    def test_zero_seams_returns_copy(self):
        image = torch.rand(3, 10, 10)
        carved = carve_image(image, n_seams=0)
        assert torch.equal(carved, image)
        assert carved is not image

    def test_seam_avoids_high_energy_edge(self):
        H, W = 30, 40
        image = make_edge_image(H, W, edge_col=20)
        carved = carve_image(image, n_seams=5)
        values = carved[0, H // 2, :]
        diffs = (values[1:] - values[:-1]).abs()
        assert diffs.max() > 0.5, f"Edge disappeared: max diff = {diffs.max():.4f}"

    def test_rows_keep_their_order(self):
        image = torch.arange(12, dtype=torch.int32).unsqueeze(0).expand(6, 12).contiguous()
        carved = carve_image(image, n_seams=4)
        for row in carved.tolist():
            assert row == sorted(row)
            assert row[0] == 0 and row[-1] == 11

    def test_custom_energy_and_comparator(self):
        image = torch.rand(1, 12, 15)
        carved = carve_image(image, 3, energy_fn=laplacian_energy, cmp=operator.gt)
        assert carved.shape == (1, 12, 12)

    def test_too_many_seams(self):
        image = torch.rand(3, 10, 6)
        assert carve_image(image, 4).shape == (3, 10, 2)
        with pytest.raises(ValueError, match="at most 4"):
            carve_image(image, 5)
        with pytest.raises(ValueError, match="non-negative"):
            carve_image(image, -1)

    def test_logs_each_seam(self, caplog):
        with caplog.at_level(logging.DEBUG, logger='seamcarve.carving'):
            carve_image(torch.rand(3, 10, 10), n_seams=3)
        assert len([r for r in caplog.records if 'Removed' in r.getMessage()]) == 3


class TestGrowImage:
    def test_increases_width(self):
        image = torch.randint(0, 256, (3, 12, 16), dtype=torch.uint8)
        grown = grow_image(image, n_seams=5)
        assert grown.shape == (3, 12, 21)
        assert grown.dtype == torch.uint8

    def test_increases_height(self):
        image = torch.rand(12, 16)
        assert grow_image(image, 3, direction='horizontal').shape == (15, 16)

    def test_original_rows_survive(self):
        torch.manual_seed(4)
        image = torch.randint(0, 256, (10, 14), dtype=torch.uint8)
        grown = grow_image(image, 4)
        for before, after in zip(image.tolist(), grown.tolist()):
            assert is_subsequence(before, after)

    def test_seams_spread_out(self):
        """Each inserted seam lands in a different place."""
        image = torch.zeros(1, 8, 20)
        image[:, :, 10:] = 1.0
        grown = grow_image(image, 6)
        # Uniform areas stay uniform, and the single edge stays a single edge.
        values = grown[0, 4]
        assert ((values[1:] - values[:-1]).abs() > 0).sum() <= 2

    def test_constant_image_stays_constant(self):
        image = torch.full((3, 6, 8), 42, dtype=torch.uint8)
        grown = grow_image(image, 4)
        assert (grown == 42).all()

    def test_too_many_seams(self):
        with pytest.raises(ValueError):
            grow_image(torch.rand(3, 10, 6), 5)


class TestResizeImage:
    def test_shrink_both(self):
        assert resize_image(torch.rand(3, 20, 24), 15, 18).shape == (3, 15, 18)

    def test_grow_both(self):
        assert resize_image(torch.rand(3, 20, 24), 23, 30).shape == (3, 23, 30)

    def test_mixed(self):
        assert resize_image(torch.rand(20, 24), 22, 20).shape == (22, 20)

    def test_same_size(self):
        image = torch.rand(3, 8, 8)
        assert torch.equal(resize_image(image, 8, 8), image)

    def test_invalid_size(self):
        with pytest.raises(ValueError, match="positive"):
            resize_image(torch.rand(3, 8, 8), 0, 8)


class TestDrawSeams:
    def test_frame_marks_both_seams(self):
        torch.manual_seed(2)
        image = torch.rand(3, 20, 24) * 0.5
        before = image.clone()
        frame = draw_seams(image, 4, 2, [1.0, 1.0, 1.0])

        assert torch.equal(image, before)
        assert frame.shape == (3, 18, 20)
        marked = (frame == 1.0).all(dim=0)
        assert marked.any(dim=1).all(), "every row crossed by the vertical seam"
        assert marked.any(dim=0).all(), "every column crossed by the horizontal seam"

    def test_no_carving(self):
        image = torch.zeros(10, 10, dtype=torch.uint8)
        frame = draw_seams(image, 0, 0, [255])
        assert frame.shape == (10, 10)
        assert (frame == 255).sum() >= 10
