import json
import os
import threading
from datetime import date
from typing import Any

from pydantic import ValidationError

from ledger_categorizer.core.errors import NotFound
from ledger_categorizer.logger import get_logger
from ledger_categorizer.models import Category, Transaction

from .base import Forbidden, Found, LedgerStore, Lookup, Missing

logger = get_logger(__name__)


class JsonLedgerStore(LedgerStore):
    """
    Keeps every user's categories and transactions in one JSON file.

    Layout: ``{user_id: {"categories": [...], "transactions": [...]}}``.
    """

    def __init__(self, data_path: str = "ledger.json"):
        self.data_path = data_path
        self._lock = threading.Lock()
        self.users: dict[str, dict[str, list[dict[str, Any]]]] = {}
        self.load()

    def load(self) -> None:
        if not os.path.exists(self.data_path):
            self.users = {}
            return
        try:
            with open(self.data_path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning("[STORE] %s is not valid JSON; starting empty.", self.data_path)
            data = {}
        self.users = data if isinstance(data, dict) else {}

    def save(self) -> None:
        tmp_path = f"{self.data_path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self.users, f, indent=2)
        os.replace(tmp_path, self.data_path)

    def _user(self, user_id: str) -> dict[str, list[dict[str, Any]]]:
        return self.users.setdefault(user_id, {"categories": [], "transactions": []})

    def _owner_of(self, kind: str, entity_id: str) -> str | None:
        for user_id, bucket in self.users.items():
            if any(row.get("id") == entity_id for row in bucket.get(kind, [])):
                return user_id
        return None

    def _load_rows(self, model: type, rows: list[dict[str, Any]]) -> list:
        items = []
        for row in rows:
            try:
                items.append(model.model_validate(row))
            except ValidationError as exc:
                logger.warning("[STORE] Skipping invalid %s row %s: %s", model.__name__, row.get("id"), exc)
        return items

    def list_categories(self, user_id: str) -> list[Category]:
        rows = self.users.get(user_id, {}).get("categories", [])
        return self._load_rows(Category, rows)

    def add_category(self, user_id: str, category: Category) -> Category:
        with self._lock:
            self._user(user_id)["categories"].append(category.model_dump(mode="json"))
            self.save()
        return category

    def seed_categories(self, user_id: str, categories: list[Category]) -> int:
        with self._lock:
            bucket = self._user(user_id)
            if bucket["categories"]:
                return len(bucket["categories"])
            bucket["categories"] = [c.model_dump(mode="json") for c in categories]
            self.save()
            logger.info("[STORE] Seeded %d categories for user %s.", len(categories), user_id)
            return len(categories)

    def get_category(self, user_id: str, category_id: str) -> Lookup[Category]:
        for category in self.list_categories(user_id):
            if category.id == category_id:
                return Found(category)
        if self._owner_of("categories", category_id) is not None:
            return Forbidden("category", category_id)
        return Missing("category", category_id)

    def update_category(self, user_id: str, category: Category) -> Category:
        with self._lock:
            rows = self._user(user_id)["categories"]
            for i, row in enumerate(rows):
                if row.get("id") == category.id:
                    rows[i] = category.model_dump(mode="json")
                    break
            else:
                raise NotFound(f"category {category.id} not found")
            self.save()
        return category

    def delete_category(self, user_id: str, category_id: str) -> None:
        with self._lock:
            bucket = self._user(user_id)
            bucket["categories"] = [row for row in bucket["categories"] if row.get("id") != category_id]
            cleared = 0
            for row in bucket["transactions"]:
                if row.get("category_id") == category_id:
                    row["category_id"] = None
                    cleared += 1
            self.save()
        logger.info(
            "[STORE] Deleted category %s for user %s; %d transactions uncategorized.",
            category_id,
            user_id,
            cleared,
        )

    def list_transactions(
        self,
        user_id: str,
        start: date | None = None,
        end: date | None = None,
        *,
        only_uncategorized: bool = False,
    ) -> list[Transaction]:
        rows = self.users.get(user_id, {}).get("transactions", [])
        result = []
        for tx in self._load_rows(Transaction, rows):
            if start is not None and tx.date < start:
                continue
            if end is not None and tx.date >= end:
                continue
            if only_uncategorized and tx.category_id is not None:
                continue
            result.append(tx)
        return result

    def get_transaction(self, user_id: str, transaction_id: str) -> Lookup[Transaction]:
        for tx in self.list_transactions(user_id):
            if tx.id == transaction_id:
                return Found(tx)
        if self._owner_of("transactions", transaction_id) is not None:
            return Forbidden("transaction", transaction_id)
        return Missing("transaction", transaction_id)

    def save_transactions(self, user_id: str, transactions: list[Transaction]) -> None:
        if not transactions:
            return
        with self._lock:
            rows = self._user(user_id)["transactions"]
            positions = {row.get("id"): i for i, row in enumerate(rows)}
            for tx in transactions:
                row = tx.model_dump(mode="json")
                if tx.id in positions:
                    rows[positions[tx.id]] = row
                else:
                    positions[tx.id] = len(rows)
                    rows.append(row)
            self.save()
