# tests/test_shopclient.py
from fastapi.testclient import TestClient
from sdk.shopclient import ShopClient
from tokenshop.main import app

OWNER = "0x00000000000000000000000000000000000000a0"
BUYER = "0x00000000000000000000000000000000000000b1"
THIRD = "0x00000000000000000000000000000000000000c3"

def make_client(caller=None):
    c = ShopClient(base_url="http://testserver", caller=caller)
    c.session = TestClient(app)
    c.reset()
    return c

def priced_shop(c):
    shop = c.deploy_shop(caller=OWNER)
    c.add_product(shop, 0, "oreo", 10, caller=OWNER)
    token = c.deploy_token(1000, "Shop Token One", 18, "ST1", caller=BUYER)
    c.set_price(shop, 0, token, 150, caller=OWNER)
    c.approve(token, shop, 150, caller=BUYER)
    return shop, token

def test_default_caller_is_used_for_buy():
    c = make_client()
    shop, token = priced_shop(c)
    c.as_caller(THIRD)
    r = c.buy(shop, BUYER, 150, token, 0)
    assert r.status_code == 200
    assert r.json()["caller"] == THIRD

def test_buy_falls_back_to_buyer_as_caller():
    c = make_client()
    shop, token = priced_shop(c)
    r = c.buy(shop, BUYER, 150, token, 0)
    assert r.status_code == 200
    assert r.json()["caller"] == BUYER
    assert c.product(shop, 0)["stock"] == 9
    assert c.balance_of(token, OWNER) == 150
