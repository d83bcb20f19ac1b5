from typing import Annotated

from fastapi import APIRouter, Depends

from ledger_categorizer.api.dependencies import get_pipeline, get_user_id
from ledger_categorizer.api.schemas import MonthRequest
from ledger_categorizer.models import CategorizationSummary
from ledger_categorizer.services.categorization import CategorizationPipeline

router = APIRouter(prefix="/api/ai")


@router.post("/categorize", response_model=CategorizationSummary)
async def categorize_uncategorized(
    req: MonthRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    pipeline: Annotated[CategorizationPipeline, Depends(get_pipeline)],
) -> CategorizationSummary:
    """Let the AI service categorize the month's uncategorized transactions."""
    return await pipeline.categorize_month(user_id, req.year, req.month, only_uncategorized=True)


@router.post("/recategorize", response_model=CategorizationSummary)
async def recategorize_all(
    req: MonthRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    pipeline: Annotated[CategorizationPipeline, Depends(get_pipeline)],
) -> CategorizationSummary:
    """Let the AI service categorize every transaction of the month again."""
    return await pipeline.categorize_month(user_id, req.year, req.month, only_uncategorized=False)
