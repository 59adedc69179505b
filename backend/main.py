from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dominant_colors import __version__
from dominant_colors.api.v1 import router as v1_router
from dominant_colors.errors import ConvergenceTimeout, EmptyInput, InvalidConfiguration
from dominant_colors.schemas import HealthResponse
from dominant_colors.utils.logging import configure_logging

configure_logging()

app = FastAPI(
    title="Dominant Colors",
    description="K-means++ dominant color extraction for images",
    version=__version__
)

app.include_router(v1_router)


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__}
    )


@app.exception_handler(InvalidConfiguration)
async def invalid_configuration_handler(request: Request, exc: InvalidConfiguration):
    return _error_response(400, exc)


@app.exception_handler(EmptyInput)
async def empty_input_handler(request: Request, exc: EmptyInput):
    return _error_response(422, exc)


@app.exception_handler(ConvergenceTimeout)
async def convergence_timeout_handler(request: Request, exc: ConvergenceTimeout):
    return _error_response(503, exc)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    return HealthResponse(ok=True, version=__version__, service="dominant-colors")


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Dominant Colors API",
        "version": __version__,
        "docs": "/docs"
    }
