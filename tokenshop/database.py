import asyncio
import logging
from typing import Dict, Any, List

# This file holds all the in-memory contract state and concurrency locks.

logger = logging.getLogger("tokenshop.database")

SHOPS: Dict[str, Dict[str, Any]] = {}
TOKENS: Dict[str, Dict[str, Any]] = {}
EVENTS: List[Dict[str, Any]] = []
_LOCKS: Dict[str, asyncio.Lock] = {}

def _get_lock(key: str) -> asyncio.Lock:
    if key not in _LOCKS:
        _LOCKS[key] = asyncio.Lock()
    return _LOCKS[key]

async def acquire_all(keys: List[str]) -> List[asyncio.Lock]:
    """Take the locks for keys in sorted order; release with release_all()."""
    locks = [_get_lock(k) for k in sorted(set(keys))]
    for l in locks:
        await l.acquire()
    return locks

def release_all(locks: List[asyncio.Lock]) -> None:
    for l in reversed(locks):
        try:
            l.release()
        except RuntimeError:
            pass

def commit_logs(logs: List[Dict[str, Any]]) -> None:
    for log in logs:
        EVENTS.append(log)
        logger.info("%s @ %s %s", log["event"], log["contract"], log["args"])

def clear_all() -> None:
    SHOPS.clear()
    TOKENS.clear()
    EVENTS.clear()
    _LOCKS.clear()
