"""
Dominant Colors

Extracts a small palette of representative colors from an image with
K-means++ clustering in RGB space.
"""

__version__ = "1.0.0"
