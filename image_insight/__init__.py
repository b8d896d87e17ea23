"""Image Insight: image analysis backend with per-user history."""

__version__ = "1.0.0"
