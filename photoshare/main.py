import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from photoshare.db import Database
from photoshare.routes.photos import router as photos_router
from photoshare.routes.users import router as users_router
from photoshare.utils.config import Settings, settings as default_settings
from photoshare.utils.errors import register_exception_handlers
from photoshare.utils.log import configure_logging


logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or default_settings
    database = database or Database(settings.DATABASE_URL)

    app = FastAPI(title="Photoshare API", version="0.1.0")
    app.state.database = database

    # Tables are created when the app is built so the schema exists before the first request
    database.create_all()

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    register_exception_handlers(app)

    # Routers
    app.include_router(users_router)
    app.include_router(photos_router)

    return app


app = create_app()


def main() -> None:
    configure_logging(default_settings.LOG_LEVEL)
    logger.info("Starting Photoshare API on %s:%s", default_settings.HOST, default_settings.PORT)
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    main()
