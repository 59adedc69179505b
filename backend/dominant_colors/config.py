"""
Dominant Colors Configuration
Manages environment variables and defaults for the clustering service.
"""
import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Configuration class for the dominant colors service."""

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("DOMCOL_MAX_FILE_MB", "10"))

    # Clustering defaults
    DEFAULT_COLORS_NUM: int = int(os.environ.get("DOMCOL_DEFAULT_COLORS_NUM", "5"))
    DEFAULT_CLUSTERS_NUM: int = int(os.environ.get("DOMCOL_DEFAULT_CLUSTERS_NUM", "5"))
    DEFAULT_SIMILARITY: float = float(os.environ.get("DOMCOL_DEFAULT_SIMILARITY", "0.15"))
    MAX_ITERATIONS: int = int(os.environ.get("DOMCOL_MAX_ITERATIONS", "300"))
    WORKERS: int = int(os.environ.get("DOMCOL_WORKERS", "1"))

    # Downscaling bounds applied before clustering
    RESIZE_WIDTH: int = int(os.environ.get("DOMCOL_RESIZE_WIDTH", "100"))
    RESIZE_HEIGHT: int = int(os.environ.get("DOMCOL_RESIZE_HEIGHT", "100"))

    # Logging
    LOG_LEVEL: str = os.environ.get("DOMCOL_LOG_LEVEL", "INFO")

    # Formats Pillow can decode for us (first frame only for animated GIF)
    SUPPORTED_EXTENSIONS = {".bmp", ".gif", ".jpeg", ".jpg", ".png", ".webp", ".xbm", ".xpm"}

    @classmethod
    def validate_extension(cls, filename: str) -> bool:
        """Validate a file name against the supported image extensions."""
        ext = os.path.splitext(filename.lower())[1]
        return ext in cls.SUPPORTED_EXTENSIONS


# Global config instance
config = Config()
