import json
import re
from dataclasses import dataclass
from typing import Any

import httpx
import openai
from openai import OpenAI

from ledger_categorizer.core import settings
from ledger_categorizer.core.errors import ConfigurationError, InvalidResponse, UpstreamUnavailable
from ledger_categorizer.logger import get_logger
from ledger_categorizer.models import BatchItem, CategorizationResult, CategoryRef

from .prompts import get_system_prompt, get_user_prompt

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class ValidMapping:
    entries: dict[str, Any]


@dataclass(frozen=True)
class Malformed:
    reason: str


ParsedResponse = ValidMapping | Malformed


def _load_object(text: str) -> Any:
    candidates = [text]
    fenced = _FENCE_RE.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            return json.loads(candidate.strip())
        except json.JSONDecodeError:
            continue
    raise ValueError("no JSON object found")


def parse_response(text: str | None) -> ParsedResponse:
    """
    Turn raw model output into a tagged result.

    Accepts a bare JSON object, a fenced ```json block, or an object
    embedded in surrounding prose. Anything else is ``Malformed``.
    """
    if not text or not text.strip():
        return Malformed("empty response")
    try:
        data = _load_object(text)
    except ValueError:
        return Malformed("response is not JSON")
    if not isinstance(data, dict):
        return Malformed(f"expected a JSON object, got {type(data).__name__}")
    return ValidMapping(entries=data)


def validate_mapping(
    entries: dict[str, Any],
    items: list[BatchItem],
    categories: list[CategoryRef],
) -> CategorizationResult:
    valid_indices = {item.index for item in items}
    valid_ids = {category.id for category in categories}

    result: CategorizationResult = {}
    for raw_key, raw_value in entries.items():
        try:
            index = int(str(raw_key).strip())
        except ValueError:
            logger.debug("[AI] Dropping non-integer key %r.", raw_key)
            continue
        if index not in valid_indices:
            logger.debug("[AI] Dropping unknown index %s.", index)
            continue
        if not isinstance(raw_value, str) or raw_value.strip() not in valid_ids:
            logger.debug("[AI] Dropping unknown category %r for index %s.", raw_value, index)
            continue
        result[str(index)] = raw_value.strip()
    return result


class LLMBatchCategorizer:
    """
    Categorizes a batch of transactions with one chat-completions call.

    Works against any OpenAI-compatible endpoint (AIML API by default).
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        json_mode: bool = True,
    ):
        api_key = api_key or settings.get_ai_api_key()
        if not api_key:
            raise ConfigurationError("AIML_API_KEY is not configured")

        self.model = model or settings.get_ai_model()
        self.base_url = base_url or settings.get_ai_base_url()
        self.json_mode = json_mode
        self.client = OpenAI(
            api_key=api_key,
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout or settings.get_ai_timeout()),
            max_retries=0,
        )

    def categorize(
        self,
        items: list[BatchItem],
        categories: list[CategoryRef],
    ) -> CategorizationResult:
        if not items:
            return {}

        request: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": get_system_prompt(categories)},
                {"role": "user", "content": get_user_prompt(items)},
            ],
            "temperature": 0.1,
            "max_tokens": 4096,
        }
        if self.json_mode:
            request["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.completions.create(**request)
        except openai.APIConnectionError as exc:
            logger.error("[AI] Service unreachable: %s", exc)
            raise UpstreamUnavailable(
                "AI service is unavailable", details={"model": self.model}
            ) from exc
        except openai.APIStatusError as exc:
            logger.error("[AI] Service returned status %s: %s", exc.status_code, exc)
            raise UpstreamUnavailable(
                f"AI service error: {exc.status_code}",
                details={"model": self.model, "status_code": exc.status_code},
            ) from exc

        content = self._extract_content(response)
        parsed = parse_response(content)
        if isinstance(parsed, Malformed):
            logger.error(
                "[AI] Invalid response (%s): %.200r",
                parsed.reason,
                content,
            )
            raise InvalidResponse(
                "AI service returned an invalid response",
                details={"reason": parsed.reason},
            )

        result = validate_mapping(parsed.entries, items, categories)
        logger.info(
            "[AI] Categorized %d of %d transactions (%d entries returned).",
            len(result),
            len(items),
            len(parsed.entries),
        )
        return result

    @staticmethod
    def _extract_content(response: object) -> str | None:
        choices = getattr(response, "choices", None)
        if not choices:
            return None
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        return content if isinstance(content, str) else None
