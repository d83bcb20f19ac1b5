from datetime import date
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

CategoryType = Literal["income", "expense"]

# Index (as an integer string) -> category id.
CategorizationResult = dict[str, str]


class Category(BaseModel):
    id: str
    name: str
    type: CategoryType
    keywords: str | None = None  # comma-separated, case-insensitive

    @field_validator("keywords", mode="before")
    @classmethod
    def _join_keyword_list(cls, value: Any) -> Any:
        if isinstance(value, list | tuple):
            return ", ".join(str(item) for item in value)
        return value

    def ref(self) -> "CategoryRef":
        return CategoryRef(id=self.id, name=self.name, type=self.type)


class CategoryRef(BaseModel):
    id: str
    name: str
    type: CategoryType


class Transaction(BaseModel):
    id: str
    description: str = ""
    amount: Decimal = Decimal("0")
    type: CategoryType = "expense"
    date: date
    category_id: str | None = None

    @field_validator("amount", mode="after")
    @classmethod
    def _absolute_amount(cls, value: Decimal) -> Decimal:
        return abs(value)


class BatchItem(BaseModel):
    index: int = Field(ge=0)
    description: str
    amount: Decimal
    type: CategoryType


class CategorizationSummary(BaseModel):
    updated: int
    total: int
    message: str


class SyncSummary(BaseModel):
    imported: int
    ai_categorized: int = 0
    keyword_categorized: int = 0
    skipped: int = 0
    message: str
