from fastapi import FastAPI

from app.sitescope.api import api_router
from app.sitescope.core.config import settings
from app.sitescope.core.errors import setup_exception_handlers
from app.sitescope.core.logging import configure_logging
from app.sitescope.middleware.actor import ActorContextMiddleware
from app.sitescope.middleware.observability import ObservabilityMiddleware
from app.sitescope.middleware.trace import TraceIdMiddleware


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.APP_NAME)
    app.add_middleware(ActorContextMiddleware)
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    setup_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
