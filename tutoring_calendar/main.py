# tutoring_calendar/main.py

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from redis import Redis

from .config import Settings, get_settings
from .errors import register_error_handlers
from .middleware.access_policy import access_policy_middleware
from .middleware.audit import audit_middleware
from .redis_client import get_redis
from .routers import calendar, catalog
from .services.contact_form import ContactFormRegistry
from .services.reservation import ReservationWorkflow
from .services.session_store import CalendarSessionStore
from .services.session_sweeper import session_sweeper_loop
from .services.webhook import WebhookService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        def session_store() -> CalendarSessionStore:
            redis = app.dependency_overrides.get(get_redis, get_redis)()
            return CalendarSessionStore(redis, ttl_seconds=settings.session_ttl_seconds)

        sweeper = asyncio.create_task(session_sweeper_loop(
            session_store,
            app.state.contact_forms,
            app.state.workflow,
            settings.session_sweep_interval_seconds,
        ))
        yield
        sweeper.cancel()
        await asyncio.gather(sweeper, return_exceptions=True)
        await app.state.contact_forms.close_all()

    app = FastAPI(title="Tutoring Booking Calendar", lifespan=lifespan)

    app.state.workflow = ReservationWorkflow(
        WebhookService(settings.webhook_url, timeout=settings.webhook_timeout_seconds),
        delay_seconds=settings.booking_delay_seconds,
    )
    app.state.contact_forms = ContactFormRegistry()

    register_error_handlers(app)

    # ===== Middleware order (last added runs first) =====
    app.middleware("http")(access_policy_middleware)
    app.middleware("http")(audit_middleware)

    app.include_router(catalog.router)
    app.include_router(calendar.router)

    @app.get("/health")
    def health(redis: Redis = Depends(get_redis)):
        return {"redis": redis.ping()}

    if not settings.webhook_url:
        logger.warning("WEBHOOK_URL not set, bookings will not be forwarded")

    return app


app = create_app()
