def parse_keyword_list(raw_keywords: str | None) -> list[str]:
    """Split a comma-separated keyword string into lower-cased terms.

    Order is preserved; the matcher's tie-break depends on it.
    """
    if not raw_keywords:
        return []
    keywords: list[str] = []
    for part in raw_keywords.split(","):
        keyword = part.strip().lower()
        if keyword:
            keywords.append(keyword)
    return keywords
