"""
Fungible token contracts.

Each token keeps balances and allowances the way a standard token contract
does: the creator receives the whole initial amount, holders approve
spenders, and spenders pull funds with transfer_from. The shop's purchase
flow calls transfer_from while it holds the token lock, so the lock-free
helpers here never mutate anything before every check has passed.
"""

import logging
from typing import Any, Dict

from fastapi import HTTPException

from .core import (
    TokenIn, ApproveIn, TransferIn,
    normalize_address, new_address, new_tx_hash, make_event, make_receipt
)
from .database import TOKENS, acquire_all, release_all, commit_logs

logger = logging.getLogger("tokenshop.tokens")


def token_lock_key(address: str) -> str:
    return f"token:{address}"


def get_token(address: str) -> Dict[str, Any]:
    token = TOKENS.get(normalize_address(address))
    if token is None:
        raise HTTPException(status_code=404, detail="token_not_found")
    return token


def _balance(token: Dict[str, Any], owner: str) -> int:
    return token["balances"].get(owner, 0)


def _allowance(token: Dict[str, Any], owner: str, spender: str) -> int:
    return token["allowances"].get(owner, {}).get(spender, 0)


def _move(token: Dict[str, Any], sender: str, to: str, value: int) -> None:
    balances = token["balances"]
    balances[sender] = balances.get(sender, 0) - value
    balances[to] = balances.get(to, 0) + value


def transfer_from_unlocked(token: Dict[str, Any], spender: str, owner: str, to: str,
                           value: int, tx_hash: str) -> Dict[str, Any]:
    """
    Move value from owner to to on behalf of spender.

    Caller must hold the token lock. Raises 402 before touching state when
    the allowance or the balance is too low; returns the Transfer event.
    """
    if _allowance(token, owner, spender) < value:
        raise HTTPException(status_code=402, detail="insufficient_allowance")
    if _balance(token, owner) < value:
        raise HTTPException(status_code=402, detail="insufficient_balance")

    allowed = token["allowances"].setdefault(owner, {})
    allowed[spender] = allowed.get(spender, 0) - value
    _move(token, owner, to, value)
    return make_event("Transfer", token["address"], tx_hash, _from=owner, _to=to, _value=value)


async def deploy_token_logic(caller: str, payload: TokenIn):
    address = new_address()
    TOKENS[address] = {
        "address": address,
        "name": payload.name,
        "symbol": payload.symbol,
        "decimals": payload.decimals,
        "total_supply": payload.initial_amount,
        "creator": caller,
        "balances": {caller: payload.initial_amount},
        "allowances": {},
    }
    logger.info("Deployed token %s (%s) supply=%d for %s",
                address, payload.symbol, payload.initial_amount, caller)
    return make_receipt(new_tx_hash(), address, caller, [])


async def token_info_logic(address: str):
    token = get_token(address)
    return {k: token[k] for k in ("address", "name", "symbol", "decimals", "total_supply", "creator")}


async def balance_of_logic(address: str, owner: str):
    token = get_token(address)
    owner = normalize_address(owner)
    return {"token": token["address"], "owner": owner, "balance": _balance(token, owner)}


async def allowance_logic(address: str, owner: str, spender: str):
    token = get_token(address)
    owner = normalize_address(owner)
    spender = normalize_address(spender)
    return {
        "token": token["address"],
        "owner": owner,
        "spender": spender,
        "allowance": _allowance(token, owner, spender),
    }


async def approve_logic(address: str, caller: str, payload: ApproveIn):
    token = get_token(address)
    spender = normalize_address(payload.spender)

    locks = await acquire_all([token_lock_key(token["address"])])
    try:
        token["allowances"].setdefault(caller, {})[spender] = payload.value
        tx_hash = new_tx_hash()
        logs = [make_event("Approval", token["address"], tx_hash,
                           _owner=caller, _spender=spender, _value=payload.value)]
        commit_logs(logs)
        return make_receipt(tx_hash, token["address"], caller, logs)
    finally:
        release_all(locks)


async def transfer_logic(address: str, caller: str, payload: TransferIn):
    token = get_token(address)
    to = normalize_address(payload.to)

    locks = await acquire_all([token_lock_key(token["address"])])
    try:
        if _balance(token, caller) < payload.value:
            raise HTTPException(status_code=402, detail="insufficient_balance")
        _move(token, caller, to, payload.value)
        tx_hash = new_tx_hash()
        logs = [make_event("Transfer", token["address"], tx_hash,
                           _from=caller, _to=to, _value=payload.value)]
        commit_logs(logs)
        return make_receipt(tx_hash, token["address"], caller, logs)
    finally:
        release_all(locks)
