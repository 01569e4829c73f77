import asyncio
from sdk.shopclient import ShopClient

OWNER = "0x00000000000000000000000000000000000000a1"
BUYERS = [
    "0x00000000000000000000000000000000000000b1",
    "0x00000000000000000000000000000000000000b2",
]
PRICE = 500

async def simulate_purchase(client, shop, token, buyer):
    r = await client.buy_async(shop, buyer, PRICE, token, 0)
    if r.status_code == 200:
        print(f"✅ {buyer} bought the last unit (tx {r.json()['tx_hash'][:12]}...)")
    elif r.status_code == 409:
        print(f"❌ {buyer} purchase failed: product sold out.")
    else:
        print(f"❌ {buyer} purchase failed with {r.status_code}: {r.json()}")

async def main():
    c = ShopClient()
    c.reset()

    shop = c.deploy_shop(caller=OWNER)
    c.add_product(shop, 0, "Gaming Laptop", 1, caller=OWNER)

    token = c.deploy_token(10000, "Demo Token", 18, "DMO", caller=OWNER)
    c.set_price(shop, 0, token, PRICE, caller=OWNER)

    # Fund and approve both buyers
    for buyer in BUYERS:
        c.transfer(token, buyer, 2000, caller=OWNER)
        c.approve(token, shop, PRICE, caller=buyer)

    print("\n⚡ Simulating concurrent purchases of the last unit...")
    await asyncio.gather(*(simulate_purchase(c, shop, token, b) for b in BUYERS))

    print("\n📦 Final product state:", c.product(shop, 0))
    for buyer in BUYERS:
        print(f"👛 {buyer}: {c.balance_of(token, buyer)}")
    print(f"🏪 owner: {c.balance_of(token, OWNER)}")

if __name__ == "__main__":
    asyncio.run(main())
