from ledger_categorizer.models import BatchItem, CategoryRef

SYSTEM_PROMPT_TEMPLATE = """You are an expert in categorizing Dutch bank transactions. You know Dutch banks, shops, companies and services.

Dutch bank statements often contain cryptic descriptions, for example:
- "NL12INGB0001234567 AH to Go" -> groceries (Albert Heijn)
- "CCV*Thuisbezorgd.nl" -> eating out
- "SEPA Overboeking Vattenfall" -> energy
- "Betaalautomaat 12:34 Shell" -> transport
Ignore IBANs, card numbers, dates and location codes.

Available EXPENSE categories (id: name):
{expense_categories}

Available INCOME categories (id: name):
{income_categories}

RULES:
1. Look at the core of the description (company name, service).
2. When in doubt, use the amount as a hint.
3. Only use category ids from the lists above.
4. If you cannot classify a transaction with confidence, leave it out.
5. Answer with a single JSON object mapping each transaction index (as a string key) to a category id, e.g. {{"0": "<category-id>", "3": "<category-id>"}}. No explanation, no other text."""


def _format_categories(categories: list[CategoryRef], category_type: str) -> str:
    lines = [f"{c.id}: {c.name}" for c in categories if c.type == category_type]
    return "\n".join(lines) if lines else "(none)"


def get_system_prompt(categories: list[CategoryRef]) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(
        expense_categories=_format_categories(categories, "expense"),
        income_categories=_format_categories(categories, "income"),
    )


def get_user_prompt(items: list[BatchItem]) -> str:
    lines = [
        f"{item.index}|{item.type}|€{item.amount:.2f}|{item.description}"
        for item in items
    ]
    return "Categorize these transactions (index|type|amount|description):\n" + "\n".join(lines)
