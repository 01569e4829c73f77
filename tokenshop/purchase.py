"""
Purchase executor.

buyWithTokens pulls exactly the listed price from the buyer through the
token's allowance and hands one unit of stock over. The shop lock and the
token lock are held for the whole check/transfer/decrement sequence; every
check runs before the first mutation, so a rejected purchase leaves stock,
balances and allowances as they were.
"""

import logging

from fastapi import HTTPException

from .core import BuyWithTokensIn, normalize_address, new_tx_hash, make_event, make_receipt
from .database import acquire_all, release_all, commit_logs
from .ledger import get_shop, listed_product, shop_lock_key
from .tokens import get_token, token_lock_key, transfer_from_unlocked

logger = logging.getLogger("tokenshop.purchase")


def _reject(shop_address: str, req: BuyWithTokensIn, status_code: int, detail: str):
    logger.warning("Purchase rejected shop=%s product=%s buyer=%s: %s",
                   shop_address, req.product_id, req.buyer, detail)
    return HTTPException(status_code=status_code, detail=detail)


async def buy_with_tokens_logic(address: str, caller: str, req: BuyWithTokensIn):
    shop = get_shop(address)
    buyer = normalize_address(req.buyer)
    token = get_token(req.token)

    locks = await acquire_all([shop_lock_key(shop["address"]), token_lock_key(token["address"])])
    try:
        p = listed_product(shop, req.product_id)
        if p is None:
            raise _reject(shop["address"], req, 404, "product_not_listed")
        if p["stock"] <= 0:
            raise _reject(shop["address"], req, 409, "out_of_stock")

        price = p["prices"].get(token["address"], 0)
        if price == 0:
            raise _reject(shop["address"], req, 400, "no_price_for_token")
        if req.amount != price:
            raise _reject(shop["address"], req, 400, "price_mismatch")

        tx_hash = new_tx_hash()
        try:
            transfer_event = transfer_from_unlocked(
                token, spender=shop["address"], owner=buyer, to=shop["owner"],
                value=req.amount, tx_hash=tx_hash
            )
        except HTTPException as e:
            raise _reject(shop["address"], req, e.status_code, e.detail)

        # Commit
        p["stock"] -= 1
        logs = [
            make_event("ProductPurchased", shop["address"], tx_hash, id=req.product_id, buyer=buyer),
            transfer_event,
        ]
        commit_logs(logs)
        return make_receipt(tx_hash, shop["address"], caller, logs)
    finally:
        release_all(locks)
