from abc import ABC, abstractmethod

from ledger_categorizer.models import Category, Transaction


class Classifier(ABC):
    @abstractmethod
    def classify(self, transaction: Transaction, categories: list[Category]) -> str | None:
        """Return the id of the category to assign, or None."""
        pass
