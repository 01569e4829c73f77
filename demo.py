#!/usr/bin/env python
from sdk.shopclient import ShopClient

OWNER = "0x00000000000000000000000000000000000000a1"
BUYER = "0x00000000000000000000000000000000000000b2"

def main():
    c = ShopClient()

    # -----------------------------
    # Reset everything for demo
    # -----------------------------
    print("Resetting ledger...")
    c.reset()

    # -----------------------------
    # Deploy shop and tokens
    # -----------------------------
    print("\nDeploying shop...")
    shop = c.deploy_shop(caller=OWNER)
    print(shop, "owned by", c.owner(shop))

    print("\nDeploying buyer tokens...")
    st1 = c.deploy_token(10000, "Shop Token One", 18, "ST1", caller=BUYER)
    st2 = c.deploy_token(20000, "Shop Token Two", 18, "ST2", caller=BUYER)
    print(c.token_info(st1))
    print(c.token_info(st2))

    # -----------------------------
    # List a product and price it
    # -----------------------------
    print("\nAdding product 0 (oreo, 100 in stock)...")
    print(c.add_product(shop, 0, "oreo", 100, caller=OWNER))
    print(c.set_price(shop, 0, st1, 150, caller=OWNER))
    print(c.set_price(shop, 0, st2, 350, caller=OWNER))
    print(c.list_products(shop))

    # -----------------------------
    # Buy without allowance
    # -----------------------------
    print("\nBuying without allowance...")
    r = c.buy(shop, BUYER, 150, st1, 0)
    print(r.status_code, r.json())

    # -----------------------------
    # Approve and buy
    # -----------------------------
    print("\nApproving shop for 150 ST1 and buying...")
    print(c.approve(st1, shop, 150, caller=BUYER))
    r = c.buy(shop, BUYER, 150, st1, 0)
    print(r.status_code, r.json())

    print("\nProduct after purchase:", c.product(shop, 0))
    print("Owner ST1 balance:", c.balance_of(st1, OWNER))
    print("Buyer ST1 balance:", c.balance_of(st1, BUYER))

    print("\nShop events:")
    for e in c.events(contract=shop):
        print(e["event"], e["args"])

if __name__ == "__main__":
    main()
