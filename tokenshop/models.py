# tokenshop/models.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List

class Product(BaseModel):
    id: int
    name: str = ""
    stock: int = 0
    listed: bool = False
    prices: Dict[str, int] = Field(default_factory=dict)

class ProductView(BaseModel):
    """What products(id) returns: the record without its price list."""
    id: int
    name: str
    stock: int
    listed: bool

class TokenInfo(BaseModel):
    address: str
    name: str
    symbol: str
    decimals: int
    total_supply: int
    creator: str

class EventLog(BaseModel):
    event: str
    contract: str
    tx_hash: str
    args: Dict[str, Any]

class Receipt(BaseModel):
    tx_hash: str
    contract: str
    caller: str
    logs: List[EventLog] = Field(default_factory=list)
