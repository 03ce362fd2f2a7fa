"""Grayscale + fixed-threshold binarisation applied before OCR."""

import numpy as np
from PIL import Image

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])
THRESHOLD = 128


def to_grayscale(image: Image.Image) -> np.ndarray:
    """Luminance-weighted gray levels (0-255, uint8) for an image of any mode."""
    rgb = np.asarray(image.convert("RGB"), dtype=np.float64)
    gray = rgb @ LUMA_WEIGHTS
    return np.clip(np.rint(gray), 0, 255).astype(np.uint8)


def binarize(gray: np.ndarray, threshold: int = THRESHOLD) -> np.ndarray:
    """Pixels strictly brighter than ``threshold`` become white, the rest black."""
    return np.where(gray > threshold, 255, 0).astype(np.uint8)


def preprocess_image(image: Image.Image, threshold: int = THRESHOLD) -> Image.Image:
    """Return a new black-and-white ("L" mode) copy of ``image``."""
    return Image.fromarray(binarize(to_grayscale(image), threshold))
