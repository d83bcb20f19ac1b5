from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Generic, TypeVar

from ledger_categorizer.models import Category, Transaction

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class Missing:
    entity: str
    entity_id: str


@dataclass(frozen=True)
class Forbidden:
    """The entity exists but belongs to another user."""
    entity: str
    entity_id: str


Lookup = Found[T] | Missing | Forbidden


class LedgerStore(ABC):
    @abstractmethod
    def list_categories(self, user_id: str) -> list[Category]:
        pass

    @abstractmethod
    def add_category(self, user_id: str, category: Category) -> Category:
        pass

    @abstractmethod
    def seed_categories(self, user_id: str, categories: list[Category]) -> int:
        """Store ``categories`` only when the user has none. Returns the user's category count."""
        pass

    @abstractmethod
    def get_category(self, user_id: str, category_id: str) -> Lookup[Category]:
        pass

    @abstractmethod
    def update_category(self, user_id: str, category: Category) -> Category:
        """Replace the stored category with the same id."""
        pass

    @abstractmethod
    def delete_category(self, user_id: str, category_id: str) -> None:
        """Remove the category and clear it from the user's transactions."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: str,
        start: date | None = None,
        end: date | None = None,
        *,
        only_uncategorized: bool = False,
    ) -> list[Transaction]:
        """Transactions with ``start <= date < end``, in insertion order."""
        pass

    @abstractmethod
    def get_transaction(self, user_id: str, transaction_id: str) -> Lookup[Transaction]:
        pass

    @abstractmethod
    def save_transactions(self, user_id: str, transactions: list[Transaction]) -> None:
        """Insert new transactions or replace existing ones with the same id."""
        pass
