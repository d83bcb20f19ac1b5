from typing import Annotated

from fastapi import Header, HTTPException, Request

from ledger_categorizer.core.errors import NotFound, Unauthorized
from ledger_categorizer.manager import CategorizerService
from ledger_categorizer.services.categorization import CategorizationPipeline
from ledger_categorizer.storage.base import Forbidden, Found, LedgerStore, Lookup, T


def get_service(request: Request) -> CategorizerService:
    service = getattr(request.app.state, "service", None)
    if not service:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return service


def get_store(request: Request) -> LedgerStore:
    store = getattr(request.app.state, "store", None)
    if not store:
        raise HTTPException(status_code=500, detail="Store not initialized")
    return store


def get_pipeline(request: Request) -> CategorizationPipeline:
    pipeline = getattr(request.app.state, "pipeline", None)
    if not pipeline:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return pipeline


def get_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id.strip()


def unwrap(lookup: Lookup[T]) -> T:
    if isinstance(lookup, Found):
        return lookup.value
    if isinstance(lookup, Forbidden):
        raise Unauthorized(f"{lookup.entity} {lookup.entity_id} does not belong to this user")
    raise NotFound(f"{lookup.entity} {lookup.entity_id} not found")
