import uvicorn
from fastapi import FastAPI, HTTPException

from themecolor import __version__
from themecolor.api.theme import router as theme_router
from themecolor.config import config
from themecolor.schemas import HealthResponse
from themecolor.utils.logging import get_logger
from themecolor.utils.metrics import get_metrics

logger = get_logger()

app = FastAPI(
    title="ThemeColor",
    description="Average color of a remote image as a hex string",
    version=__version__
)

app.include_router(theme_router)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Service health check."""
    return HealthResponse(
        ok=True,
        version=__version__,
        service="themecolor"
    )


@app.get("/metrics")
def service_metrics():
    """Get in-process request metrics."""
    if not config.METRICS_ENABLED:
        raise HTTPException(status_code=404, detail="Metrics are disabled")
    return get_metrics().get_summary()


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "ThemeColor API",
        "version": __version__,
        "docs": "/docs"
    }


def run():
    """Start the HTTP server on all interfaces."""
    logger.info(f"Service will run on {config.bind_address()}")
    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
