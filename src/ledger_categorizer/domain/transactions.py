from decimal import Decimal

from ledger_categorizer.models import Transaction


def dedupe_key(tx: Transaction) -> str:
    """Key used to recognise an already imported bank transaction."""
    return f"{tx.date.isoformat()}|{Decimal(tx.amount):.2f}|{tx.description[:50]}"
