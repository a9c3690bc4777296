import logging

from fastapi import FastAPI

from .api.routes import router as sessions_router
from .config.settings import settings
from .telemetry import init_telemetry, shutdown_telemetry


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="Capture Studio API", version="0.1.0")
    app.include_router(sessions_router)

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    if init_telemetry(app):
        app.add_event_handler("shutdown", shutdown_telemetry)
    return app


app = create_app()
