from ledger_categorizer.classifiers.keyword import KeywordMatcher
from ledger_categorizer.classifiers.llm import LLMBatchCategorizer
from ledger_categorizer.core import settings
from ledger_categorizer.core.errors import ConfigurationError
from ledger_categorizer.logger import get_logger
from ledger_categorizer.models import (
    BatchItem,
    CategorizationResult,
    Category,
    CategoryRef,
    Transaction,
)

logger = get_logger(__name__)


class CategorizerService:
    def __init__(
        self,
        llm: LLMBatchCategorizer | None = None,
        batch_size: int | None = None,
        match_type: bool = True,
    ):
        self.keyword = KeywordMatcher(match_type=match_type)
        self.batch_size = batch_size or settings.get_ai_batch_size()
        if llm is not None:
            self.llm: LLMBatchCategorizer | None = llm
        else:
            self.llm = self._build_llm()

    @staticmethod
    def _build_llm() -> LLMBatchCategorizer | None:
        if not settings.get_ai_api_key():
            logger.warning("AIML_API_KEY not found. AI categorization disabled.")
            return None
        llm = LLMBatchCategorizer()
        logger.info(f"AI categorizer enabled: model={llm.model}, base_url={llm.base_url}")
        return llm

    def refresh_llm(self) -> None:
        """Rebuild the AI client from the current environment."""
        self.llm = self._build_llm()

    @property
    def ai_enabled(self) -> bool:
        return self.llm is not None

    def ensure_ai_configured(self) -> LLMBatchCategorizer:
        if self.llm is None:
            raise ConfigurationError("AIML_API_KEY is not configured")
        return self.llm

    def keyword_match(self, transaction: Transaction, categories: list[Category]) -> str | None:
        return self.keyword.classify(transaction, categories)

    def categorize_batch(
        self,
        items: list[BatchItem],
        categories: list[CategoryRef],
    ) -> CategorizationResult:
        """
        Send ``items`` to the AI service in chunks of ``batch_size``.

        Indices are kept global across chunks. Any failing chunk aborts the
        whole batch so callers never apply a partial result.
        """
        llm = self.ensure_ai_configured()
        result: CategorizationResult = {}
        for start in range(0, len(items), self.batch_size):
            chunk = items[start:start + self.batch_size]
            logger.debug(
                "[AI] Sending chunk %d-%d of %d.",
                start,
                start + len(chunk) - 1,
                len(items),
            )
            result.update(llm.categorize(chunk, categories))
        return result
