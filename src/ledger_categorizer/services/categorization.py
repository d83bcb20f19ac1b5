import asyncio
import uuid

from ledger_categorizer.core.errors import CategorizationError
from ledger_categorizer.domain.periods import month_range
from ledger_categorizer.domain.transactions import dedupe_key
from ledger_categorizer.logger import get_logger
from ledger_categorizer.manager import CategorizerService
from ledger_categorizer.models import (
    BatchItem,
    CategorizationResult,
    CategorizationSummary,
    Category,
    SyncSummary,
    Transaction,
)
from ledger_categorizer.storage.base import Forbidden, Found, LedgerStore

logger = get_logger(__name__)


def build_batch(transactions: list[Transaction]) -> list[BatchItem]:
    return [
        BatchItem(index=i, description=t.description, amount=t.amount, type=t.type)
        for i, t in enumerate(transactions)
    ]


def apply_assignments(
    transactions: list[Transaction],
    result: CategorizationResult,
    categories: list[Category],
    *,
    sync_type: bool = True,
) -> dict[int, Transaction]:
    """
    Resolve index -> transaction and assign the chosen categories.

    Returns updated copies keyed by index. Unknown indices and category ids
    are skipped. With ``sync_type`` the transaction takes the category's type.
    """
    category_types = {c.id: c.type for c in categories}
    updated: dict[int, Transaction] = {}
    for idx_str, category_id in result.items():
        try:
            idx = int(idx_str)
        except ValueError:
            continue
        if not 0 <= idx < len(transactions) or category_id not in category_types:
            continue

        tx = transactions[idx]
        changes: dict[str, object] = {"category_id": category_id}
        category_type = category_types[category_id]
        if sync_type and category_type != tx.type:
            changes["type"] = category_type
        updated[idx] = tx.model_copy(update=changes)
    return updated


class CategorizationPipeline:
    def __init__(self, service: CategorizerService, store: LedgerStore) -> None:
        self.service = service
        self.store = store

    async def ai_categorize(
        self,
        user_id: str,
        transactions: list[Transaction],
        categories: list[Category],
        *,
        sync_type: bool = True,
    ) -> CategorizationSummary:
        self.service.ensure_ai_configured()
        total = len(transactions)

        result = await asyncio.to_thread(
            self.service.categorize_batch,
            build_batch(transactions),
            [c.ref() for c in categories],
        )
        updated = apply_assignments(transactions, result, categories, sync_type=sync_type)
        self.store.save_transactions(user_id, list(updated.values()))

        logger.info("[AI] User %s: %d of %d transactions categorized.", user_id, len(updated), total)
        return CategorizationSummary(
            updated=len(updated),
            total=total,
            message=f"{len(updated)} of {total} transactions categorized by AI",
        )

    async def categorize_month(
        self,
        user_id: str,
        year: int,
        month: int,
        *,
        only_uncategorized: bool = True,
    ) -> CategorizationSummary:
        # Refuse before touching storage or the network.
        self.service.ensure_ai_configured()

        start, end = month_range(year, month)
        transactions = self.store.list_transactions(
            user_id, start, end, only_uncategorized=only_uncategorized
        )
        if not transactions:
            message = (
                "All transactions are already categorized"
                if only_uncategorized
                else "No transactions found"
            )
            return CategorizationSummary(updated=0, total=0, message=message)

        categories = self.store.list_categories(user_id)
        return await self.ai_categorize(user_id, transactions, categories)

    def keyword_categorize(
        self,
        user_id: str,
        transactions: list[Transaction],
        categories: list[Category],
        *,
        only_uncategorized: bool = True,
    ) -> CategorizationSummary:
        updated: list[Transaction] = []
        for tx in transactions:
            if only_uncategorized and tx.category_id is not None:
                continue
            category_id = self.service.keyword_match(tx, categories)
            if category_id and category_id != tx.category_id:
                updated.append(tx.model_copy(update={"category_id": category_id}))
        self.store.save_transactions(user_id, updated)

        total = len(transactions)
        logger.info("[KEYWORD] User %s: %d of %d transactions categorized.", user_id, len(updated), total)
        return CategorizationSummary(
            updated=len(updated),
            total=total,
            message=f"{len(updated)} of {total} transactions categorized by keyword",
        )

    def keyword_categorize_month(self, user_id: str, year: int, month: int) -> CategorizationSummary:
        start, end = month_range(year, month)
        transactions = self.store.list_transactions(user_id, start, end, only_uncategorized=True)
        categories = self.store.list_categories(user_id)
        return self.keyword_categorize(user_id, transactions, categories)

    async def sync_transactions(self, user_id: str, incoming: list[Transaction]) -> SyncSummary:
        """
        Import bank transactions: skip duplicates, try AI, fall back to keywords.

        An incoming row is skipped when its dedupe key or its id is already
        stored for the user or repeated within the batch. Ids owned by another
        user are replaced with fresh ones.
        """
        if not incoming:
            return SyncSummary(imported=0, message="No transactions to import")

        start = min(t.date for t in incoming)
        end = max(t.date for t in incoming)
        existing = self.store.list_transactions(user_id, start, None)
        seen = {dedupe_key(t) for t in existing if t.date <= end}
        seen_ids: set[str] = set()

        new_transactions: list[Transaction] = []
        for tx in incoming:
            key = dedupe_key(tx)
            if key in seen or tx.id in seen_ids:
                continue
            lookup = self.store.get_transaction(user_id, tx.id)
            if isinstance(lookup, Found):
                # Stored rows are never overwritten by an import.
                continue
            seen.add(key)
            seen_ids.add(tx.id)
            if isinstance(lookup, Forbidden):
                tx = tx.model_copy(update={"id": str(uuid.uuid4())})
            new_transactions.append(tx)
        skipped = len(incoming) - len(new_transactions)

        if not new_transactions:
            return SyncSummary(
                imported=0,
                skipped=skipped,
                message="All transactions were already imported",
            )

        categories = self.store.list_categories(user_id)

        ai_categorized = 0
        if self.service.ai_enabled:
            try:
                result = await asyncio.to_thread(
                    self.service.categorize_batch,
                    build_batch(new_transactions),
                    [c.ref() for c in categories],
                )
            except CategorizationError as exc:
                logger.error("[SYNC] AI categorization failed during sync: %s", exc.message)
            else:
                for idx, tx in apply_assignments(new_transactions, result, categories).items():
                    new_transactions[idx] = tx
                    ai_categorized += 1

        keyword_categorized = 0
        for idx, tx in enumerate(new_transactions):
            if tx.category_id is not None:
                continue
            category_id = self.service.keyword_match(tx, categories)
            if category_id:
                new_transactions[idx] = tx.model_copy(update={"category_id": category_id})
                keyword_categorized += 1

        self.store.save_transactions(user_id, new_transactions)
        logger.info(
            "[SYNC] User %s: imported %d (ai=%d, keyword=%d, skipped=%d).",
            user_id,
            len(new_transactions),
            ai_categorized,
            keyword_categorized,
            skipped,
        )
        return SyncSummary(
            imported=len(new_transactions),
            ai_categorized=ai_categorized,
            keyword_categorized=keyword_categorized,
            skipped=skipped,
            message=f"{len(new_transactions)} transactions imported",
        )
