from .loader import SUPPORTED_EXTENSIONS, ImageLoader
from .renderer import image_to_matrix, luminance_band

__all__ = ["image_to_matrix", "ImageLoader", "luminance_band", "SUPPORTED_EXTENSIONS"]
