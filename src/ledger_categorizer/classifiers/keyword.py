from collections.abc import Iterable

from ledger_categorizer.domain.descriptions import normalize_description
from ledger_categorizer.domain.keywords import parse_keyword_list
from ledger_categorizer.logger import get_logger
from ledger_categorizer.models import Category, Transaction

from .base import Classifier

logger = get_logger(__name__)


def match(description: str, categories: Iterable[Category]) -> str | None:
    """
    Pick the category whose longest keyword occurs in ``description``.

    Matching is a case-insensitive substring test against both the raw
    description and its normalized form (see ``normalize_description``).
    On equal keyword length the first keyword seen (categories in order,
    then keywords in order) wins.
    """
    desc_lower = (description or "").lower()
    if not desc_lower:
        return None
    normalized = normalize_description(desc_lower)

    best_id: str | None = None
    best_len = 0
    for category in categories:
        for keyword in parse_keyword_list(category.keywords):
            if len(keyword) > best_len and (keyword in desc_lower or keyword in normalized):
                best_id = category.id
                best_len = len(keyword)
    return best_id


class KeywordMatcher(Classifier):
    def __init__(self, match_type: bool = True):
        # Only consider categories whose type equals the transaction's type.
        self.match_type = match_type

    def classify(self, transaction: Transaction, categories: list[Category]) -> str | None:
        candidates = categories
        if self.match_type:
            candidates = [c for c in categories if c.type == transaction.type]

        category_id = match(transaction.description, candidates)
        logger.debug(
            "[KEYWORD] '%s' -> %s",
            transaction.description[:50],
            category_id or "no match",
        )
        return category_id
