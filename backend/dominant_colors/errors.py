"""
Dominant Colors Errors
Typed failures raised by the clustering core and the pixel source.
"""
from typing import List, Optional


class DominantColorsError(Exception):
    """Base class for all dominant color extraction failures."""


class EmptyInput(DominantColorsError):
    """No pixels were available to cluster."""

    def __init__(self, message: str = "No pixels supplied"):
        super().__init__(message)


class InvalidConfiguration(DominantColorsError, ValueError):
    """The clustering options were rejected as a whole."""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = fields or []


class ConvergenceTimeout(DominantColorsError):
    """Center drift stayed above the similarity threshold for too many iterations."""

    def __init__(self, iterations: int, max_drift: float, similarity: float):
        super().__init__(
            f"No convergence after {iterations} iterations "
            f"(max drift {max_drift:.4f} >= similarity {similarity})"
        )
        self.iterations = iterations
        self.max_drift = max_drift
        self.similarity = similarity
