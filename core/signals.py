"""
Structural image signals: intensity entropy, edge-energy density,
noise estimate and EXIF presence.
"""
from dataclasses import dataclass

import numpy as np
from PIL import Image
from scipy import ndimage

# 3x3 high-pass (Laplacian-style) kernel
LAPLACIAN_KERNEL = np.array([
    [-1, -1, -1],
    [-1, 8, -1],
    [-1, -1, -1],
], dtype=np.float64)

NOISE_DIVISOR = 128.0


@dataclass(frozen=True)
class ImageSignals:
    entropy: float
    edge_density: float
    noise: float
    exif_present: bool


def calc_entropy(hist) -> float:
    """Shannon entropy (bits) of a histogram"""
    hist = np.asarray(hist, dtype=np.float64)
    total = hist.sum()
    if total <= 0:
        return 0.0
    probabilities = hist[hist > 0] / total
    return float(-np.sum(probabilities * np.log2(probabilities)))


def calc_edge_density(gray: np.ndarray) -> float:
    """
    Sum of absolute Laplacian responses over ``samples * 255``.
    Not clamped; strongly textured images can exceed 1.
    """
    edges = ndimage.convolve(gray.astype(np.float64), LAPLACIAN_KERNEL, mode='nearest')
    return float(np.abs(edges).sum() / max(1, edges.size * 255))


def extract_signals(image: Image.Image, exif_present: bool) -> ImageSignals:
    """
    Compute signals from the (already downsampled) statistics image.

    Args:
        image: Normalized statistics copy
        exif_present: Whether the original container carried EXIF data,
            read before re-encoding stripped it
    """
    if image.mode != 'RGB':
        image = image.convert('RGB')

    grayscale = image.convert('L')
    entropy = calc_entropy(grayscale.histogram())
    edge_density = calc_edge_density(np.asarray(grayscale))

    first_channel = np.asarray(image, dtype=np.float64)[:, :, 0]
    noise = float(np.std(first_channel)) / NOISE_DIVISOR if first_channel.size else 0.0

    return ImageSignals(
        entropy=entropy,
        edge_density=edge_density,
        noise=noise,
        exif_present=bool(exif_present),
    )
