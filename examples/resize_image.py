#!/usr/bin/env python3
"""
Content-aware resize of an image file.

Example:
    python resize_image.py input.jpg output.png --width 400
    python resize_image.py input.jpg output.png --width 640 --height 300 --energy scharr
"""

import argparse
import logging
import sys
import time

sys.path.insert(0, '..')

import numpy as np
import torch
from PIL import Image

from seamcarve import get_energy_function, resize_image


def load_image(path: str, device='cpu') -> torch.Tensor:
    """Load an image as a (3, H, W) uint8 tensor."""
    img = Image.open(path).convert('RGB')
    img_array = np.array(img, dtype=np.uint8)
    return torch.from_numpy(img_array).permute(2, 0, 1).contiguous().to(device)


def save_image(tensor: torch.Tensor, path: str):
    """Save a (3, H, W) uint8 tensor."""
    img_array = tensor.permute(1, 2, 0).cpu().numpy()
    Image.fromarray(img_array).save(path)
    print(f"Saved: {path}")


def main():
    parser = argparse.ArgumentParser(description="Seam carving resize")
    parser.add_argument('input', help='Input image')
    parser.add_argument('output', help='Output image')
    parser.add_argument('--width', type=int, help='Target width (default: unchanged)')
    parser.add_argument('--height', type=int, help='Target height (default: unchanged)')
    parser.add_argument('--energy', default='sobel',
                        help='Energy function: sobel, scharr or laplacian (default: sobel)')
    parser.add_argument('--verbose', action='store_true', help='Log every seam')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(message)s')

    device = 'cuda' if torch.cuda.is_available() else 'cpu'
    image = load_image(args.input, device=device)
    _, H, W = image.shape
    height = args.height or H
    width = args.width or W
    print(f"Resizing {W}x{H} -> {width}x{height} ({args.energy} energy, {device})")

    try:
        energy_fn = get_energy_function(args.energy)
        start = time.time()
        result = resize_image(image, height, width, energy_fn=energy_fn)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Done in {time.time() - start:.1f}s")
    save_image(result, args.output)


if __name__ == '__main__':
    main()
