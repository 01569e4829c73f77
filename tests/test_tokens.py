# tests/test_tokens.py
from fastapi.testclient import TestClient
from tokenshop.main import app

client = TestClient(app)

ALICE = "0x00000000000000000000000000000000000000a1"
BOB = "0x00000000000000000000000000000000000000b2"

def reset():
    client.post("/reset")

def deploy_token(caller=ALICE, amount=10000, symbol="ST1"):
    r = client.post("/tokens", json={"initial_amount": amount, "name": "Shop Token One", "decimals": 18, "symbol": symbol},
                    headers={"X-Caller": caller})
    assert r.status_code == 201
    return r.json()["contract"]

def balance(token, owner):
    return client.get(f"/tokens/{token}/balances/{owner}").json()["balance"]

def test_deploy_credits_creator():
    reset()
    token = deploy_token()
    info = client.get(f"/tokens/{token}").json()
    assert info["symbol"] == "ST1"
    assert info["decimals"] == 18
    assert info["total_supply"] == 10000
    assert info["creator"] == ALICE
    assert balance(token, ALICE) == 10000
    assert balance(token, BOB) == 0

def test_unknown_token():
    reset()
    r = client.get("/tokens/0x00000000000000000000000000000000000000ff")
    assert r.status_code == 404
    assert r.json()["detail"] == "token_not_found"

def test_approve_sets_allowance_and_emits_approval():
    reset()
    token = deploy_token()
    r = client.post(f"/tokens/{token}/approve", json={"spender": BOB, "value": 150}, headers={"X-Caller": ALICE})
    assert r.status_code == 200
    log = r.json()["logs"][0]
    assert log["event"] == "Approval"
    assert log["args"] == {"_owner": ALICE, "_spender": BOB, "_value": 150}
    assert client.get(f"/tokens/{token}/allowances/{ALICE}/{BOB}").json()["allowance"] == 150

    # approve overwrites rather than adds
    client.post(f"/tokens/{token}/approve", json={"spender": BOB, "value": 20}, headers={"X-Caller": ALICE})
    assert client.get(f"/tokens/{token}/allowances/{ALICE}/{BOB}").json()["allowance"] == 20

def test_transfer_moves_balance():
    reset()
    token = deploy_token()
    r = client.post(f"/tokens/{token}/transfer", json={"to": BOB, "value": 400}, headers={"X-Caller": ALICE})
    assert r.status_code == 200
    assert r.json()["logs"][0]["args"] == {"_from": ALICE, "_to": BOB, "_value": 400}
    assert balance(token, ALICE) == 9600
    assert balance(token, BOB) == 400

def test_transfer_insufficient_balance_changes_nothing():
    reset()
    token = deploy_token(amount=100)
    r = client.post(f"/tokens/{token}/transfer", json={"to": BOB, "value": 101}, headers={"X-Caller": ALICE})
    assert r.status_code == 402
    assert r.json()["detail"] == "insufficient_balance"
    assert balance(token, ALICE) == 100
    assert balance(token, BOB) == 0

def test_events_filter_by_contract_and_name():
    reset()
    t1 = deploy_token(symbol="ST1")
    t2 = deploy_token(symbol="ST2")
    client.post(f"/tokens/{t1}/approve", json={"spender": BOB, "value": 1}, headers={"X-Caller": ALICE})
    client.post(f"/tokens/{t2}/transfer", json={"to": BOB, "value": 1}, headers={"X-Caller": ALICE})
    only_t1 = client.get("/events", params={"contract": t1}).json()
    assert [e["event"] for e in only_t1] == ["Approval"]
    transfers = client.get("/events", params={"event": "Transfer"}).json()
    assert [e["contract"] for e in transfers] == [t2]
