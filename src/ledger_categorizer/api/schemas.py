import uuid
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from ledger_categorizer.models import Category, CategoryType, Transaction


class MonthRequest(BaseModel):
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1900, le=9999)


class KeywordMatchRequest(BaseModel):
    description: str
    type: CategoryType | None = None


class KeywordMatchResponse(BaseModel):
    category_id: str | None


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    type: CategoryType
    keywords: str | list[str] | None = None

    def to_category(self) -> Category:
        return Category(id=str(uuid.uuid4()), name=self.name, type=self.type, keywords=self.keywords)


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    type: CategoryType | None = None
    keywords: str | list[str] | None = None

    def apply(self, category: Category) -> Category:
        changes = self.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return category
        return Category.model_validate({**category.model_dump(), **changes})


class TransactionIn(BaseModel):
    id: str | None = None
    description: str
    amount: Decimal
    date: date
    type: CategoryType | None = None

    def to_transaction(self) -> Transaction:
        # Bank feeds send signed amounts; the sign decides the type when none is given.
        tx_type = self.type or ("income" if self.amount > 0 else "expense")
        return Transaction(
            id=self.id or str(uuid.uuid4()),
            description=self.description,
            amount=self.amount,
            type=tx_type,
            date=self.date,
        )


class SyncRequest(BaseModel):
    transactions: list[TransactionIn]
