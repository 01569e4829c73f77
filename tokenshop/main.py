# tokenshop/main.py
from typing import List, Optional

from fastapi import FastAPI, Header, Path
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .core import ProductIn, PriceIn, BuyWithTokensIn, TokenIn, ApproveIn, TransferIn, require_caller
from .database import EVENTS, clear_all
from .logger import setup_logger
from .models import EventLog, ProductView, Product, Receipt, TokenInfo
from . import ledger, purchase, tokens

settings = get_settings()
logger = setup_logger(settings.log_level, settings.log_dir or None)

app = FastAPI(title=settings.app_name, version=settings.app_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------
# Shop endpoints
# ---------------------------
@app.post("/shops", status_code=201, response_model=Receipt)
async def deploy_shop(x_caller: Optional[str] = Header(None)):
    return await ledger.deploy_shop_logic(require_caller(x_caller))

@app.get("/shops/{shop}/owner")
async def shop_owner(shop: str):
    return await ledger.owner_logic(shop)

@app.post("/shops/{shop}/products", response_model=Receipt)
async def add_product(shop: str, payload: ProductIn, x_caller: Optional[str] = Header(None)):
    return await ledger.add_product_logic(shop, require_caller(x_caller), payload)

@app.get("/shops/{shop}/products", response_model=List[Product])
async def list_products(shop: str, available_only: bool = False):
    return await ledger.list_products_logic(shop, available_only)

@app.get("/shops/{shop}/products/{product_id}", response_model=ProductView)
async def get_product(shop: str, product_id: int = Path(..., ge=0)):
    return await ledger.get_product_logic(shop, product_id)

@app.post("/shops/{shop}/products/{product_id}/prices", response_model=Receipt)
async def set_price(shop: str, payload: PriceIn, product_id: int = Path(..., ge=0),
                    x_caller: Optional[str] = Header(None)):
    return await ledger.set_price_logic(shop, product_id, require_caller(x_caller), payload)

@app.get("/shops/{shop}/products/{product_id}/prices/{token}")
async def get_product_price(shop: str, token: str, product_id: int = Path(..., ge=0)):
    return await ledger.get_product_price_logic(shop, product_id, token)

@app.post("/shops/{shop}/buy", response_model=Receipt)
async def buy_with_tokens(shop: str, req: BuyWithTokensIn, x_caller: Optional[str] = Header(None)):
    return await purchase.buy_with_tokens_logic(shop, require_caller(x_caller), req)

# ---------------------------
# Token endpoints
# ---------------------------
@app.post("/tokens", status_code=201, response_model=Receipt)
async def deploy_token(payload: TokenIn, x_caller: Optional[str] = Header(None)):
    return await tokens.deploy_token_logic(require_caller(x_caller), payload)

@app.get("/tokens/{token}", response_model=TokenInfo)
async def token_info(token: str):
    return await tokens.token_info_logic(token)

@app.post("/tokens/{token}/approve", response_model=Receipt)
async def approve(token: str, payload: ApproveIn, x_caller: Optional[str] = Header(None)):
    return await tokens.approve_logic(token, require_caller(x_caller), payload)

@app.post("/tokens/{token}/transfer", response_model=Receipt)
async def transfer(token: str, payload: TransferIn, x_caller: Optional[str] = Header(None)):
    return await tokens.transfer_logic(token, require_caller(x_caller), payload)

@app.get("/tokens/{token}/balances/{owner}")
async def balance_of(token: str, owner: str):
    return await tokens.balance_of_logic(token, owner)

@app.get("/tokens/{token}/allowances/{owner}/{spender}")
async def allowance(token: str, owner: str, spender: str):
    return await tokens.allowance_logic(token, owner, spender)

# ---------------------------
# Event log
# ---------------------------
@app.get("/events", response_model=List[EventLog])
async def list_events(contract: Optional[str] = None, event: Optional[str] = None):
    out = []
    for e in EVENTS:
        if contract and e["contract"] != contract.lower():
            continue
        if event and e["event"] != event:
            continue
        out.append(e)
    return out

# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/reset")
async def reset_all():
    clear_all()
    logger.info("State reset")
    return {"status": "reset"}
