import uuid

from ledger_categorizer.models import Category

# Seed catalogue for new accounts (Dutch banking descriptions).
DEFAULT_CATEGORIES: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("Salaris", "income", ("salaris", "loon", "salary", "wage", "netto")),
    ("Freelance", "income", ("freelance", "factuur", "invoice", "opdracht")),
    ("Overige Inkomsten", "income", ("terugbetaling", "refund", "bonus", "dividend")),
    ("Boodschappen", "expense", (
        "albert heijn", "jumbo", "lidl", "aldi", "plus", "dirk", "supermarkt", "ah",
    )),
    ("Huur & Wonen", "expense", ("huur", "rent", "hypotheek", "mortgage", "woningcorporatie")),
    ("Energie & Water", "expense", (
        "vattenfall", "eneco", "essent", "greenchoice", "energie", "gas", "water", "vitens",
    )),
    ("Transport", "expense", (
        "ns", "ov-chipkaart", "shell", "bp", "tankstation", "benzine", "parking", "uber",
    )),
    ("Verzekeringen", "expense", (
        "verzekering", "insurance", "zorgverzekering", "centraal beheer", "aegon",
    )),
    ("Abonnementen", "expense", (
        "netflix", "spotify", "disney", "youtube", "kpn", "ziggo", "tele2", "vodafone",
        "gym", "sportschool",
    )),
    ("Eten & Drinken", "expense", (
        "restaurant", "thuisbezorgd", "uber eats", "deliveroo", "cafe", "koffie", "starbucks",
    )),
    ("Kleding", "expense", ("h&m", "zara", "primark", "zalando", "nike", "adidas", "kleding")),
    ("Gezondheid", "expense", ("apotheek", "huisarts", "tandarts", "ziekenhuis", "fysiotherapie")),
    ("Entertainment", "expense", ("bioscoop", "pathe", "steam", "game", "concert", "festival")),
    ("Sparen", "expense", ("spaarrekening", "savings", "beleggen", "investering")),
    ("Overig", "expense", ()),
)


def default_categories() -> list[Category]:
    return [
        Category(
            id=str(uuid.uuid4()),
            name=name,
            type=category_type,
            keywords=list(keywords) or None,
        )
        for name, category_type, keywords in DEFAULT_CATEGORIES
    ]
