"""FastAPI application factory and entrypoint.

`create_app` wires settings, the database engine, middleware, error
handlers and the resource routers together. The module-level `app` is
built from the environment for `uvicorn blog_api.main:app`; tests build
their own app around an in-memory engine.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse, Response
from sqlalchemy.engine import Engine
import json
import logging
import time
import uuid
from .config import Settings, settings as default_settings
from .database import build_engine, create_db_and_tables
from .errors import REQUEST_ID_HEADER, register_error_handlers
from . import routes

logger = logging.getLogger("blog_api.api")


def configure_logging(level: str) -> None:
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s %(message)s")


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """Build the API.

    `settings` defaults to the environment-driven `Settings`; `engine`
    defaults to one built from `settings.DATABASE_URL` and is disposed on
    shutdown; a caller-supplied engine is left open. Tables are created
    on startup.
    """
    settings = settings or default_settings
    owns_engine = engine is None
    if owns_engine:
        engine = build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        create_db_and_tables(app.state.engine)
        yield
        if owns_engine:
            app.state.engine.dispose()

    app = FastAPI(title="Blog API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine

    if settings.ALLOW_DEV_CORS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.middleware("http")(request_context_middleware)
    register_error_handlers(app)

    app.include_router(routes.usuarios)
    app.include_router(routes.temas)
    app.include_router(routes.postagem)

    @app.get("/", include_in_schema=False)
    def home():
        """Send browsers to the interactive API docs."""
        return RedirectResponse(url="/docs")

    @app.get("/health")
    def health():
        """Lightweight health check for uptime monitoring."""
        return {"status": "ok"}

    return app


def _access_record(request: Request, started: float, **extra) -> str:
    record = {
        "request_id": request.state.request_id,
        "method": request.method,
        "path": request.url.path,
        "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
    }
    record.update(extra)
    return json.dumps(record, ensure_ascii=True)


async def request_context_middleware(request: Request, call_next):
    """Tag each request with an id and write one access log line for it.

    The id comes from an incoming `X-Request-ID` header when present and
    is echoed back on the response.
    """
    request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    started = time.perf_counter()
    try:
        response: Response = await call_next(request)
    except Exception:
        # the catch-all handler in `errors` builds the 500 and sets the id header
        logger.exception("request_failed %s", _access_record(request, started))
        raise
    response.headers[REQUEST_ID_HEADER] = request.state.request_id
    logger.info("request_done %s", _access_record(request, started, status_code=response.status_code))
    return response


app = create_app()
