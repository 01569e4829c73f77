import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException

from .core import (
    ProductIn, PriceIn, normalize_address, new_address, new_tx_hash,
    make_event, make_receipt, _make_product_dict
)
from .database import SHOPS, acquire_all, release_all, commit_logs

# Shop ledger: product listing, stock and per-token prices, owner-gated.

logger = logging.getLogger("tokenshop.ledger")

def shop_lock_key(address: str) -> str:
    return f"shop:{address}"

def get_shop(address: str) -> Dict[str, Any]:
    shop = SHOPS.get(normalize_address(address))
    if shop is None:
        raise HTTPException(status_code=404, detail="shop_not_found")
    return shop

def _require_owner(shop: Dict[str, Any], caller: str) -> None:
    if caller != shop["owner"]:
        logger.warning("Rejected %s on shop %s: not owner", caller, shop["address"])
        raise HTTPException(status_code=403, detail="not_owner")

def listed_product(shop: Dict[str, Any], product_id: int) -> Optional[Dict[str, Any]]:
    p = shop["products"].get(product_id)
    if p is None or not p["listed"]:
        return None
    return p

# Deployment
async def deploy_shop_logic(caller: str):
    address = new_address()
    SHOPS[address] = {"address": address, "owner": caller, "products": {}}
    logger.info("Deployed shop %s owned by %s", address, caller)
    return make_receipt(new_tx_hash(), address, caller, [])

async def owner_logic(address: str):
    shop = get_shop(address)
    return {"shop": shop["address"], "owner": shop["owner"]}

# Products
async def add_product_logic(address: str, caller: str, payload: ProductIn):
    shop = get_shop(address)
    _require_owner(shop, caller)

    locks = await acquire_all([shop_lock_key(shop["address"])])
    try:
        if listed_product(shop, payload.id) is not None:
            raise HTTPException(status_code=409, detail="product_already_listed")

        tx_hash = new_tx_hash()
        logs = [make_event("ProductAdded", shop["address"], tx_hash,
                           id=payload.id, name=payload.name, stock=payload.stock)]
        shop["products"][payload.id] = _make_product_dict(payload)
        commit_logs(logs)
        return make_receipt(tx_hash, shop["address"], caller, logs)
    finally:
        release_all(locks)

async def get_product_logic(address: str, product_id: int):
    # Unknown ids read as the zero record, like an unset contract mapping entry.
    shop = get_shop(address)
    p = shop["products"].get(product_id)
    if not p:
        return {"id": product_id, "name": "", "stock": 0, "listed": False}
    return {"id": p["id"], "name": p["name"], "stock": p["stock"], "listed": p["listed"]}

async def list_products_logic(address: str, available_only: bool = False):
    shop = get_shop(address)
    out = []
    for pid in sorted(shop["products"]):
        p = shop["products"][pid]
        if not p["listed"]:
            continue
        if available_only and p["stock"] <= 0:
            continue
        out.append({**p, "prices": dict(p["prices"])})
    return out

# Prices
async def set_price_logic(address: str, product_id: int, caller: str, payload: PriceIn):
    shop = get_shop(address)
    _require_owner(shop, caller)
    token = normalize_address(payload.token)

    locks = await acquire_all([shop_lock_key(shop["address"])])
    try:
        p = listed_product(shop, product_id)
        if p is None:
            raise HTTPException(status_code=404, detail="product_not_listed")

        tx_hash = new_tx_hash()
        logs = [make_event("PriceSet", shop["address"], tx_hash,
                           id=product_id, token=token, price=payload.price)]
        if payload.price == 0:
            p["prices"].pop(token, None)
        else:
            p["prices"][token] = payload.price
        commit_logs(logs)
        return make_receipt(tx_hash, shop["address"], caller, logs)
    finally:
        release_all(locks)

async def get_product_price_logic(address: str, product_id: int, token: str):
    shop = get_shop(address)
    token = normalize_address(token)
    p = shop["products"].get(product_id)
    price = p["prices"].get(token, 0) if p else 0
    return {"id": product_id, "token": token, "price": price}
