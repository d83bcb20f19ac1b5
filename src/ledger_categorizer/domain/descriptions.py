import re

# Applied in order to the lower-cased description.
_NOISE_PATTERNS = [
    re.compile(r"\b[a-z]{2}\d{2}[a-z]{4}\d{10}\b", re.ASCII),  # IBAN
    re.compile(r"\b\d{6,}\b", re.ASCII),  # card and reference numbers
    re.compile(r"\b\d{2}[-/.]\d{2}[-/.]\d{2,4}\b", re.ASCII),  # dates
    re.compile(r"\b\d{8}\b", re.ASCII),
    re.compile(r"\b\d{2}:\d{2}\b", re.ASCII),  # times
    re.compile(
        r"\b(sepa|overboeking|betaalautomaat|gea|bea|ideal|ccv\*|pin|incasso|storting|europees)\b",
        re.ASCII,
    ),
    re.compile(
        r"\b(pasvolgnr|transactie|omschrijving|kenmerk|machtiging|doorlopend)\b",
        re.ASCII,
    ),
]
_WHITESPACE = re.compile(r"\s+")


def normalize_description(description: str | None) -> str:
    """
    Lower-case a bank description and strip the noise banks add around the
    merchant name: IBANs, long numbers, dates, times and payment-channel words.

    >>> normalize_description("BEA 12:34 Albert 123456789 Heijn")
    'albert heijn'
    """
    text = (description or "").lower()
    for pattern in _NOISE_PATTERNS:
        text = pattern.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()
