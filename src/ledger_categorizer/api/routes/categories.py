from typing import Annotated, Any

from fastapi import APIRouter, Depends

from ledger_categorizer.api.dependencies import get_service, get_store, get_user_id, unwrap
from ledger_categorizer.api.schemas import (
    CategoryCreate,
    CategoryUpdate,
    KeywordMatchRequest,
    KeywordMatchResponse,
)
from ledger_categorizer.classifiers.keyword import match
from ledger_categorizer.domain.defaults import default_categories
from ledger_categorizer.manager import CategorizerService
from ledger_categorizer.models import Category
from ledger_categorizer.storage.base import LedgerStore

router = APIRouter(prefix="/api")


@router.get("/categories", response_model=list[Category])
async def list_categories(
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[LedgerStore, Depends(get_store)],
) -> list[Category]:
    return store.list_categories(user_id)


@router.post("/categories", response_model=Category, status_code=201)
async def create_category(
    req: CategoryCreate,
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[LedgerStore, Depends(get_store)],
) -> Category:
    return store.add_category(user_id, req.to_category())


@router.post("/categories/seed")
async def seed_categories(
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[LedgerStore, Depends(get_store)],
) -> dict[str, Any]:
    existing = store.list_categories(user_id)
    if existing:
        return {"message": "Categories already exist", "count": len(existing)}
    count = store.seed_categories(user_id, default_categories())
    return {"message": "Categories created", "count": count}


@router.post("/categorize", response_model=KeywordMatchResponse)
async def categorize_description(
    req: KeywordMatchRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[LedgerStore, Depends(get_store)],
    service: Annotated[CategorizerService, Depends(get_service)],
) -> KeywordMatchResponse:
    categories = store.list_categories(user_id)
    if req.type and service.keyword.match_type:
        categories = [c for c in categories if c.type == req.type]
    return KeywordMatchResponse(category_id=match(req.description, categories))


@router.put("/categories/{category_id}", response_model=Category)
async def update_category(
    category_id: str,
    req: CategoryUpdate,
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[LedgerStore, Depends(get_store)],
) -> Category:
    category = unwrap(store.get_category(user_id, category_id))
    return store.update_category(user_id, req.apply(category))


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: str,
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[LedgerStore, Depends(get_store)],
) -> dict[str, bool]:
    unwrap(store.get_category(user_id, category_id))
    store.delete_category(user_id, category_id)
    return {"ok": True}
