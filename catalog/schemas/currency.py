from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CurrencyIn(BaseModel):
    currency: str = Field(min_length=3, max_length=3)
    symbol: str = Field(min_length=1)
    value: float = Field(gt=0)


class CurrencyUpdate(BaseModel):
    symbol: Optional[str] = None
    value: Optional[float] = Field(None, gt=0)


class CurrencyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    currency: str
    symbol: str
    value: float
