from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    event_backend: str = os.getenv("EVENT_BACKEND", "inmemory")  # inmemory|redis
    redis_url: str | None = os.getenv("REDIS_URL")
    event_channel: str = os.getenv("EVENT_CHANNEL", "capture_events")
    validate_payloads: bool = _env_bool("VALIDATE_PAYLOADS", True)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    otel_enabled: bool = _env_bool("OTEL_ENABLED", False)
    otel_service_name: str = os.getenv("OTEL_SERVICE_NAME", "capture-studio")
    otel_endpoint: str = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "")


settings = Settings()
