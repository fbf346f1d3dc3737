import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lifestream.application.services import build_services
from lifestream.application.use_cases.notifications import notify_app_ready
from lifestream.config import get_settings
from lifestream.infrastructure.database import SessionLocal, engine, initialize_database
from lifestream.infrastructure.notifications import notification_manager
from lifestream.infrastructure.notifications.channels import EmailSender, SoundPlayer
from lifestream.infrastructure.storage import BlobStore, SqlBlobStore
from lifestream.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


def create_app(
    *,
    store: BlobStore | None = None,
    email_sender: EmailSender | None = None,
    sound_player: SoundPlayer | None = None,
    start_scheduler: bool = True,
) -> FastAPI:
    """Create and configure the main FastAPI application.

    Without an explicit ``store`` the state is kept in the configured database.
    """

    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load the stores and run the reminder loop while the app is up."""

        blob_store = store
        if blob_store is None:
            initialize_database()
            blob_store = SqlBlobStore(SessionLocal)

        services = build_services(
            blob_store,
            config=settings,
            manager=notification_manager if store is None else None,
            email_sender=email_sender,
            sound_player=sound_player,
        )
        services.load()
        notify_app_ready(services.notifications, publisher=services.publisher)
        app.state.services = services
        if start_scheduler:
            services.scheduler.start()
        try:
            yield
        finally:
            await services.scheduler.stop()
            app.state.services = None
            if store is None:
                engine.dispose()

    app = FastAPI(title="LifeStream", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


def configure_logging() -> None:
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging()
app = create_app()
