"""Decision Journal - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.datastructures import Headers

from decision_journal.core.config import Settings, get_settings
from decision_journal.core.errors import DecisionJournalError
from decision_journal.core.logging_config import configure_logging
from decision_journal.db.base import Base
from decision_journal.db.session import create_engine, create_sessionmaker
from decision_journal.routers import api, auth, generate
from decision_journal.services.generation.generators import AlternativeGenerator, build_generator
from decision_journal.services.generation.proxy import AlternativeProxy
from decision_journal.services.scenarios import ScenarioService
from decision_journal.services.storage import ScenarioStore, build_store

logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


class EmptyPreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware whose pre-flight answer carries no body."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        headers = {
            key: value
            for key, value in response.headers.items()
            if key.lower() not in ("content-length", "content-type")
        }
        return Response(status_code=response.status_code, headers=headers)


async def decision_journal_error_handler(request: Request, exc: DecisionJournalError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        {"error": "Requisição inválida", "detail": jsonable_encoder(exc.errors())},
        status_code=422,
    )


def create_app(
    settings: Settings | None = None,
    store: ScenarioStore | None = None,
    generator: AlternativeGenerator | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Wire settings, storage and generation into one app.

    ``store``, ``generator`` and ``transport`` override what settings would pick,
    mainly for tests.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    engine = create_engine(settings)
    sessionmaker = create_sessionmaker(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # create tables (async)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("%s started (storage=%s, generator=%s)", settings.app_name,
                    settings.storage_backend, type(app.state.scenario_service.generator).__name__)
        yield
        await engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Decision journal with generated alternatives",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionmaker = sessionmaker
    app.state.alternative_proxy = AlternativeProxy(settings, transport=transport)
    app.state.scenario_service = ScenarioService(
        store=store or build_store(settings, sessionmaker),
        generator=generator or build_generator(settings, transport=transport),
        default_count=settings.default_alternative_count,
    )

    app.add_middleware(
        EmptyPreflightCORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=CORS_ALLOW_HEADERS,
    )
    app.add_exception_handler(DecisionJournalError, decision_journal_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(generate.router)
    app.include_router(auth.router)
    app.include_router(api.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("decision_journal.main:app", host="0.0.0.0", port=8000, reload=True)
