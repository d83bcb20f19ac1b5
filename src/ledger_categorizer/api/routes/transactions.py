from typing import Annotated

from fastapi import APIRouter, Depends

from ledger_categorizer.api.dependencies import get_pipeline, get_store, get_user_id, unwrap
from ledger_categorizer.api.schemas import MonthRequest, SyncRequest
from ledger_categorizer.models import CategorizationSummary, SyncSummary, Transaction
from ledger_categorizer.services.categorization import CategorizationPipeline
from ledger_categorizer.storage.base import LedgerStore

router = APIRouter(prefix="/api")


@router.get("/transactions/{transaction_id}", response_model=Transaction)
async def get_transaction(
    transaction_id: str,
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[LedgerStore, Depends(get_store)],
) -> Transaction:
    return unwrap(store.get_transaction(user_id, transaction_id))


@router.post("/transactions/auto-categorize", response_model=CategorizationSummary)
async def auto_categorize(
    req: MonthRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    pipeline: Annotated[CategorizationPipeline, Depends(get_pipeline)],
) -> CategorizationSummary:
    return pipeline.keyword_categorize_month(user_id, req.year, req.month)


@router.post("/bank/sync", response_model=SyncSummary)
async def bank_sync(
    req: SyncRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    pipeline: Annotated[CategorizationPipeline, Depends(get_pipeline)],
) -> SyncSummary:
    incoming = [t.to_transaction() for t in req.transactions]
    return await pipeline.sync_transactions(user_id, incoming)
