from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from helpdesk_bridge.api import support as support_api
from helpdesk_bridge.core.config import get_settings
from helpdesk_bridge.core.logging import setup_logging
from helpdesk_bridge.db.base import create_engine, create_sessionmaker, init_db
from helpdesk_bridge.helpdesk.client import HelpdeskClient
from helpdesk_bridge.services.ticket_service import SupportTicketService


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    setup_logging(settings.log_level)

    engine = create_engine(settings.db_url)
    sessionmaker = create_sessionmaker(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await init_db(engine)
        yield
        await engine.dispose()

    app = FastAPI(lifespan=lifespan)
    app.state.engine = engine
    app.state.sessionmaker = sessionmaker
    app.state.helpdesk_client = HelpdeskClient.from_settings(settings)
    app.state.ticket_service = SupportTicketService(sessionmaker, app.state.helpdesk_client)

    app.include_router(support_api.router)

    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(), host=settings.app_host, port=settings.app_port, log_level="info")


if __name__ == "__main__":
    main()
