"""
Clustering and image options.

A single validated value type replaces per-option checks: the whole option set
is accepted or rejected at once.
"""
from typing import Any, Dict

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from dominant_colors.config import config
from dominant_colors.errors import InvalidConfiguration


class ClusteringOptions(BaseModel):
    """Options for one clustering run."""
    model_config = ConfigDict(frozen=True, strict=True, extra="forbid", validate_default=True)

    colors_num: int = Field(config.DEFAULT_COLORS_NUM, gt=0, description="Palette size, clamped to clusters_num")
    clusters_num: int = Field(config.DEFAULT_CLUSTERS_NUM, gt=0, description="Number of clusters to form")
    similarity: float = Field(config.DEFAULT_SIMILARITY, gt=0.0, allow_inf_nan=False, description="Drift threshold in RGB units")
    verbose: bool = Field(False, description="Record initial centers and a per-iteration trace")
    max_iterations: int = Field(config.MAX_ITERATIONS, gt=0, description="Iteration cap for refinement")
    workers: int = Field(config.WORKERS, ge=1, description="Threads used for the assignment pass")

    @model_validator(mode="before")
    @classmethod
    def clamp_colors_num(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        colors = data.get("colors_num", config.DEFAULT_COLORS_NUM)
        clusters = data.get("clusters_num", config.DEFAULT_CLUSTERS_NUM)
        if type(colors) is int and type(clusters) is int and 0 < clusters < colors:
            logger.debug(f"Clamping colors_num {colors} to clusters_num {clusters}")
            data = {**data, "colors_num": clusters}
        return data


class ImageOptions(BaseModel):
    """Downscaling bounds for the pixel source."""
    model_config = ConfigDict(frozen=True, strict=True, extra="forbid", validate_default=True)

    resize_width: int = Field(config.RESIZE_WIDTH, gt=0)
    resize_height: int = Field(config.RESIZE_HEIGHT, gt=0)


def _validate(model, values: Dict[str, Any]):
    try:
        return model(**values)
    except ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) or "__root__" for err in e.errors()]
        details = "; ".join(f"{field}: {err['msg']}" for field, err in zip(fields, e.errors()))
        raise InvalidConfiguration(f"Invalid {model.__name__}: {details}", fields=fields) from e


def build_options(**values: Any) -> ClusteringOptions:
    """
    Build clustering options, rejecting the whole set if any field is invalid.

    Raises:
        InvalidConfiguration: listing every offending field
    """
    return _validate(ClusteringOptions, values)


def build_image_options(**values: Any) -> ImageOptions:
    """Build image options with the same all-or-nothing validation."""
    return _validate(ImageOptions, values)
