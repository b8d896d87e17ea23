# Models package (re-export feature modules for stable imports)
from .users.user import User
from .media.image_analysis import ImageAnalysis

__all__ = [
    "User",
    "ImageAnalysis",
]
