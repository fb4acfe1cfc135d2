from dotenv import load_dotenv
load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from showcase.core.config import Settings, load_settings
from showcase.core.logging import setup_logging
from showcase.core.rate_limit import RateLimiter
from showcase.db.base import Base
from showcase.db import models  # noqa: F401 (ensures models are registered)
from showcase.db.session import build_engine, build_session_factory
from showcase.db.seed import seed_admin, seed_email_config
from showcase.api.router import api_router
from showcase.services.email import open_smtp

logger = logging.getLogger(__name__)


#Build an application around explicitly constructed clients
def create_app(settings: Settings | None = None, smtp_factory=open_smtp) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME)

    engine = build_engine(settings.DATABASE_URL)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.smtp_factory = smtp_factory
    app.state.rate_limiter = RateLimiter()


    #configure CORS for the public site and admin frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


    #Create all database tables when the application is built
    Base.metadata.create_all(bind=engine)


    #Seed the admin account and email settings when the application starts
    @app.on_event("startup")
    def startup():
        db = app.state.session_factory()
        try:
            seed_admin(db, settings)
            seed_email_config(db, settings)
        finally:
            db.close()


    @app.on_event("shutdown")
    def shutdown():
        engine.dispose()


    #Render every HTTP error as {"error": ...}
    @app.exception_handler(StarletteHTTPException)
    def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )


    #Malformed request bodies and parameters are client errors with field detail
    @app.exception_handler(RequestValidationError)
    def validation_error(request: Request, exc: RequestValidationError):
        details = []
        for err in exc.errors():
            names = [part for part in err["loc"] if isinstance(part, str)]
            details.append({
                "field": names[-1] if names else "body",
                "message": err["msg"],
            })

        return JSONResponse(
            status_code=400,
            content={"error": "Validation failed", "details": details},
        )


    @app.exception_handler(Exception)
    def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )


    #Register all API routes under the main application
    app.include_router(api_router)

    return app


app = create_app()
