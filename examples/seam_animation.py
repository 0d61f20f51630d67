#!/usr/bin/env python3
"""
Generate a GIF of seam carving: each frame shows the current image with the
seam about to be removed painted in red.
"""

import argparse
import sys

sys.path.insert(0, '..')

import torch
from PIL import Image

from seamcarve import SeamBuffer, find_seam, remove_path, set_path, sobel_energy
from resize_image import load_image


def to_frame(image: torch.Tensor, height: int, width: int) -> Image.Image:
    """Pad a (3, H, W) uint8 tensor with black to a fixed size."""
    C, H, W = image.shape
    canvas = torch.zeros(C, height, width, dtype=torch.uint8)
    canvas[:, :H, :W] = image
    return Image.fromarray(canvas.permute(1, 2, 0).numpy())


def generate_gif(input_path, output_path, n_seams, direction='vertical', fps=10):
    image = load_image(input_path)
    C, H, W = image.shape
    buffer = SeamBuffer.for_energy(image[0], direction)

    frames = []
    current = image
    for step in range(n_seams):
        seam = find_seam(sobel_energy(current), direction, buffer=buffer)
        frames.append(to_frame(set_path(current.clone(), seam, [255, 0, 0], direction), H, W))
        current = remove_path(current, seam, direction)

        if (step + 1) % 10 == 0 or step == 0:
            print(f"  Processed seam {step + 1}/{n_seams}, size {tuple(current.shape[1:])}")
    frames.append(to_frame(current, H, W))

    duration = int(1000 / fps)
    print(f"Saving GIF to {output_path}...")
    frames[0].save(
        output_path,
        save_all=True,
        append_images=frames[1:],
        duration=duration,
        loop=0,
        optimize=False
    )
    print(f"  Frames: {len(frames)}, Duration: {len(frames) * duration / 1000:.1f}s")


def main():
    parser = argparse.ArgumentParser(description="Animate seam removal as a GIF")
    parser.add_argument('input', help='Input image')
    parser.add_argument('--output', default='seams.gif', help='Output GIF (default: seams.gif)')
    parser.add_argument('--seams', type=int, default=50, help='Seams to remove (default: 50)')
    parser.add_argument('--direction', choices=['vertical', 'horizontal'], default='vertical')
    parser.add_argument('--fps', type=int, default=10, help='Frames per second (default: 10)')
    args = parser.parse_args()

    generate_gif(args.input, args.output, args.seams, args.direction, args.fps)


if __name__ == '__main__':
    main()
