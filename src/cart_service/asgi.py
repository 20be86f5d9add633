from __future__ import annotations

from fastapi import FastAPI

from cart_service.adapters.inbound.web.fastapi_app import create_app
from cart_service.bootstrap import build_usecases
from cart_service.config import get_settings
from cart_service.utils.logging import configure_logging


def create_asgi_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.environment, settings.log_level)
    usecases = build_usecases(settings)
    return create_app(usecases.cart)
