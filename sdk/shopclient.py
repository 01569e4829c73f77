# sdk/shopclient.py
import requests
import httpx
from typing import Optional
from rich import print

from tokenshop.config import get_settings

class ShopClient:
    """
    Thin client for the token-shop HTTP API.

    Every state-changing call is sent "from" an identity (the X-Caller
    header). Pass caller= per call, or set a default with as_caller().
    Methods return the decoded JSON body and raise requests.HTTPError on
    4xx/5xx, except buy() which hands back the raw response so callers can
    inspect 402/409.
    """

    def __init__(self, base_url: Optional[str] = None, caller: Optional[str] = None, timeout: Optional[int] = None):
        settings = get_settings()
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.caller = caller
        self.session = requests.Session()
        self.timeout = timeout or settings.request_timeout

    def as_caller(self, caller: str) -> "ShopClient":
        self.caller = caller
        return self

    def _headers(self, caller: Optional[str]):
        who = caller or self.caller
        return {"X-Caller": who} if who else {}

    def _post(self, path: str, json=None, caller: Optional[str] = None):
        r = self.session.post(f"{self.base_url}{path}", json=json, headers=self._headers(caller), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def _get(self, path: str, params=None):
        r = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def reset(self):
        return self._post("/reset")

    # Shop
    def deploy_shop(self, caller: Optional[str] = None) -> str:
        """Deploy a shop owned by the caller and return its address."""
        return self._post("/shops", caller=caller)["contract"]

    def owner(self, shop: str) -> str:
        return self._get(f"/shops/{shop}/owner")["owner"]

    def add_product(self, shop: str, product_id: int, name: str, stock: int, caller: Optional[str] = None):
        return self._post(f"/shops/{shop}/products", json={"id": product_id, "name": name, "stock": stock}, caller=caller)

    def set_price(self, shop: str, product_id: int, token: str, price: int, caller: Optional[str] = None):
        return self._post(f"/shops/{shop}/products/{product_id}/prices", json={"token": token, "price": price}, caller=caller)

    def get_product_price(self, shop: str, product_id: int, token: str) -> int:
        return self._get(f"/shops/{shop}/products/{product_id}/prices/{token}")["price"]

    def product(self, shop: str, product_id: int):
        return self._get(f"/shops/{shop}/products/{product_id}")

    def list_products(self, shop: str, available_only: bool = False):
        params = {"available_only": "true"} if available_only else {}
        return self._get(f"/shops/{shop}/products", params=params)

    # Purchase
    def buy(self, shop: str, buyer: str, amount: int, token: str, product_id: int, caller: Optional[str] = None):
        payload = {"buyer": buyer, "amount": amount, "token": token, "product_id": product_id}
        r = self.session.post(f"{self.base_url}/shops/{shop}/buy", json=payload,
                              headers=self._headers(caller or self.caller or buyer), timeout=self.timeout)
        # do not r.raise_for_status() — callers may want to inspect 402/409
        return r

    async def buy_async(self, shop: str, buyer: str, amount: int, token: str, product_id: int, caller: Optional[str] = None):
        payload = {"buyer": buyer, "amount": amount, "token": token, "product_id": product_id}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(f"{self.base_url}/shops/{shop}/buy", json=payload, headers=self._headers(caller or self.caller or buyer))
            return r

    # Tokens
    def deploy_token(self, initial_amount: int, name: str, decimals: int, symbol: str, caller: Optional[str] = None) -> str:
        """Deploy a token crediting initial_amount to the caller; returns its address."""
        payload = {"initial_amount": initial_amount, "name": name, "decimals": decimals, "symbol": symbol}
        return self._post("/tokens", json=payload, caller=caller)["contract"]

    def token_info(self, token: str):
        return self._get(f"/tokens/{token}")

    def approve(self, token: str, spender: str, value: int, caller: Optional[str] = None):
        return self._post(f"/tokens/{token}/approve", json={"spender": spender, "value": value}, caller=caller)

    def transfer(self, token: str, to: str, value: int, caller: Optional[str] = None):
        return self._post(f"/tokens/{token}/transfer", json={"to": to, "value": value}, caller=caller)

    def balance_of(self, token: str, owner: str) -> int:
        return self._get(f"/tokens/{token}/balances/{owner}")["balance"]

    def allowance(self, token: str, owner: str, spender: str) -> int:
        return self._get(f"/tokens/{token}/allowances/{owner}/{spender}")["allowance"]

    # Events
    def events(self, contract: Optional[str] = None, event: Optional[str] = None):
        params = {}
        if contract:
            params["contract"] = contract
        if event:
            params["event"] = event
        return self._get("/events", params=params)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="token-shop CLI")
    parser.add_argument("--caller", help="Identity the call is sent from (0x...)")
    parser.add_argument("--base-url", help="Service URL (default from TOKENSHOP_BASE_URL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---------------------------
    # Shop commands
    # ---------------------------
    subparsers.add_parser("deploy-shop", help="Deploy a shop owned by --caller")

    ow = subparsers.add_parser("owner", help="Show a shop's owner")
    ow.add_argument("--shop", required=True)

    ap = subparsers.add_parser("add-product", help="List a new product")
    ap.add_argument("--shop", required=True)
    ap.add_argument("--id", type=int, required=True, help="Product ID")
    ap.add_argument("--name", required=True, help="Product name")
    ap.add_argument("--stock", type=int, required=True, help="Units in stock")

    sp = subparsers.add_parser("set-price", help="Set a product's price in a token")
    sp.add_argument("--shop", required=True)
    sp.add_argument("--id", type=int, required=True)
    sp.add_argument("--token", required=True)
    sp.add_argument("--price", type=int, required=True)

    gp = subparsers.add_parser("get-price", help="Show a product's price in a token")
    gp.add_argument("--shop", required=True)
    gp.add_argument("--id", type=int, required=True)
    gp.add_argument("--token", required=True)

    pr = subparsers.add_parser("product", help="Show a product record")
    pr.add_argument("--shop", required=True)
    pr.add_argument("--id", type=int, required=True)

    lp = subparsers.add_parser("list-products", help="List a shop's products")
    lp.add_argument("--shop", required=True)
    lp.add_argument("--available-only", action="store_true", help="Show only products in stock")

    by = subparsers.add_parser("buy", help="Buy one unit with tokens")
    by.add_argument("--shop", required=True)
    by.add_argument("--id", type=int, required=True)
    by.add_argument("--token", required=True)
    by.add_argument("--amount", type=int, required=True)
    by.add_argument("--buyer", help="Defaults to --caller")

    # ---------------------------
    # Token commands
    # ---------------------------
    dt = subparsers.add_parser("deploy-token", help="Deploy a token owned by --caller")
    dt.add_argument("--amount", type=int, required=True, help="Initial supply")
    dt.add_argument("--name", required=True)
    dt.add_argument("--decimals", type=int, default=18)
    dt.add_argument("--symbol", required=True)

    av = subparsers.add_parser("approve", help="Allow a spender to pull tokens")
    av.add_argument("--token", required=True)
    av.add_argument("--spender", required=True)
    av.add_argument("--value", type=int, required=True)

    bl = subparsers.add_parser("balance", help="Show a token balance")
    bl.add_argument("--token", required=True)
    bl.add_argument("--owner", required=True)

    ev = subparsers.add_parser("events", help="Show the event log")
    ev.add_argument("--contract")
    ev.add_argument("--event")

    # ---------------------------
    # Parse and execute
    # ---------------------------
    args = parser.parse_args()
    c = ShopClient(base_url=args.base_url, caller=args.caller)

    if args.command == "deploy-shop":
        print(c.deploy_shop())
    elif args.command == "owner":
        print(c.owner(args.shop))
    elif args.command == "add-product":
        print(c.add_product(args.shop, args.id, args.name, args.stock))
    elif args.command == "set-price":
        print(c.set_price(args.shop, args.id, args.token, args.price))
    elif args.command == "get-price":
        print(c.get_product_price(args.shop, args.id, args.token))
    elif args.command == "product":
        print(c.product(args.shop, args.id))
    elif args.command == "list-products":
        print(c.list_products(args.shop, args.available_only))
    elif args.command == "buy":
        r = c.buy(args.shop, args.buyer or args.caller, args.amount, args.token, args.id)
        print(r.json())
    elif args.command == "deploy-token":
        print(c.deploy_token(args.amount, args.name, args.decimals, args.symbol))
    elif args.command == "approve":
        print(c.approve(args.token, args.spender, args.value))
    elif args.command == "balance":
        print(c.balance_of(args.token, args.owner))
    elif args.command == "events":
        print(c.events(args.contract, args.event))
