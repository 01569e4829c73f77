import re
import secrets
from typing import Optional, Dict, Any, List

from fastapi import HTTPException
from pydantic import BaseModel, Field, StrictInt

# Request schemas and small helpers shared by the ledger, purchase and token logic.

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

class ProductIn(BaseModel):
    id: StrictInt = Field(..., ge=0)
    name: str
    stock: StrictInt = Field(..., ge=0)

class PriceIn(BaseModel):
    token: str
    price: StrictInt = Field(..., ge=0)

class BuyWithTokensIn(BaseModel):
    buyer: str
    amount: StrictInt = Field(..., ge=0)
    token: str
    product_id: StrictInt = Field(..., ge=0)

class TokenIn(BaseModel):
    initial_amount: StrictInt = Field(..., ge=0)
    name: str
    decimals: StrictInt = Field(18, ge=0, le=255)
    symbol: str

class ApproveIn(BaseModel):
    spender: str
    value: StrictInt = Field(..., ge=0)

class TransferIn(BaseModel):
    to: str
    value: StrictInt = Field(..., ge=0)

def normalize_address(value: Optional[str]) -> str:
    if not value or not _ADDRESS_RE.match(value):
        raise HTTPException(status_code=400, detail="invalid_address")
    return value.lower()

def require_caller(x_caller: Optional[str]) -> str:
    if not x_caller:
        raise HTTPException(status_code=400, detail="caller_required")
    return normalize_address(x_caller)

def new_address() -> str:
    return "0x" + secrets.token_hex(20)

def new_tx_hash() -> str:
    return "0x" + secrets.token_hex(32)

def make_event(_event: str, contract: str, tx_hash: str, **args: Any) -> Dict[str, Any]:
    return {"event": _event, "contract": contract, "tx_hash": tx_hash, "args": args}

def make_receipt(tx_hash: str, contract: str, caller: str, logs: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"tx_hash": tx_hash, "contract": contract, "caller": caller, "logs": logs}

def _make_product_dict(p: ProductIn) -> Dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "stock": p.stock,
        "listed": True,
        "prices": {}
    }
