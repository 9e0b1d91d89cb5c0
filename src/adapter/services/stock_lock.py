"""In-process StockLock

One asyncio.Lock per product id. Only serialises callers within a single
process; run one worker or replace with a shared lock when scaling out.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Iterable
from src.app.services.stock_lock import StockLock


class InProcessStockLock(StockLock):
    def __init__(self):
        self._locks: Dict[int, asyncio.Lock] = {}

    def _lock_for(self, product_id: int) -> asyncio.Lock:
        lock = self._locks.get(product_id)
        if lock is None:
            lock = self._locks[product_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, product_ids: Iterable[int]) -> AsyncIterator[None]:
        # Sorted, de-duplicated acquisition order avoids deadlocks
        ordered = sorted(set(product_ids))
        acquired = []
        try:
            for product_id in ordered:
                lock = self._lock_for(product_id)
                await lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
