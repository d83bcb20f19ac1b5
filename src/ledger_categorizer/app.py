import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ledger_categorizer.api.routes import ai, categories, transactions
from ledger_categorizer.core import settings
from ledger_categorizer.core.errors import CategorizationError, InvalidResponse
from ledger_categorizer.logger import get_logger, setup_logging
from ledger_categorizer.manager import CategorizerService
from ledger_categorizer.services.categorization import CategorizationPipeline
from ledger_categorizer.storage.json_store import JsonLedgerStore

logger = get_logger(__name__)


async def categorization_error_handler(request: Request, exc: CategorizationError) -> JSONResponse:
    if isinstance(exc, InvalidResponse):
        logger.warning("[AI] Invalid response on %s: %s %s", request.url.path, exc.message, exc.details)
    elif exc.http_status >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": exc.message, "updated": 0},
    )


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings.log_environment()

        if not settings.get_ai_api_key():
            logger.info("AIML_API_KEY not set. AI categorization will be disabled.")

        store = JsonLedgerStore(data_path=os.path.join(settings.DATA_DIR, "ledger.json"))
        service = CategorizerService()
        pipeline = CategorizationPipeline(service=service, store=store)

        app.state.store = store
        app.state.service = service
        app.state.pipeline = pipeline

        logger.info("Services initialized.")
        yield
        logger.info("Service shutting down.")

    app = FastAPI(title="Ledger Categorizer", lifespan=lifespan)
    app.add_exception_handler(CategorizationError, categorization_error_handler)

    app.include_router(ai.router)
    app.include_router(categories.router)
    app.include_router(transactions.router)

    return app


app = create_app()
