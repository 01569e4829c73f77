# tests/test_concurrency.py
import asyncio
import httpx
from tokenshop.main import app

OWNER = "0x00000000000000000000000000000000000000a0"
BUYERS = ["0x00000000000000000000000000000000000000b1", "0x00000000000000000000000000000000000000b2"]
PRICE = 500

async def _buy_task(ac, shop, token, buyer):
    return await ac.post(f"/shops/{shop}/buy", json={"buyer": buyer, "amount": PRICE, "token": token, "product_id": 0},
                         headers={"X-Caller": buyer})

async def _race_for_last_item():
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        await ac.post("/reset")
        shop = (await ac.post("/shops", headers={"X-Caller": OWNER})).json()["contract"]
        await ac.post(f"/shops/{shop}/products", json={"id": 0, "name": "last", "stock": 1}, headers={"X-Caller": OWNER})
        token = (await ac.post("/tokens", json={"initial_amount": 10000, "name": "T", "decimals": 18, "symbol": "T"},
                               headers={"X-Caller": OWNER})).json()["contract"]
        await ac.post(f"/shops/{shop}/products/0/prices", json={"token": token, "price": PRICE}, headers={"X-Caller": OWNER})
        for buyer in BUYERS:
            await ac.post(f"/tokens/{token}/transfer", json={"to": buyer, "value": 1000}, headers={"X-Caller": OWNER})
            await ac.post(f"/tokens/{token}/approve", json={"spender": shop, "value": PRICE}, headers={"X-Caller": buyer})

        results = await asyncio.gather(*(_buy_task(ac, shop, token, b) for b in BUYERS))

        product = (await ac.get(f"/shops/{shop}/products/0")).json()
        spent = [1000 - (await ac.get(f"/tokens/{token}/balances/{b}")).json()["balance"] for b in BUYERS]
        return [r.status_code for r in results], product, spent

def test_concurrent_last_item():
    statuses, product, spent = asyncio.run(_race_for_last_item())
    # exactly one buyer gets the unit, the other is turned away untouched
    assert sorted(statuses) == [200, 409]
    assert product["stock"] == 0
    assert sorted(spent) == [0, PRICE]
