import asyncio
from typing import Any, Dict, Sequence

from moneyflow.budgets import progress


async def dashboard_snapshot(ctx, views: Sequence) -> Dict[str, Any]:
    """Compute every dashboard view over the same snapshot concurrently.

    Views are pure functions of ``ctx``, so they share nothing and may run in
    any order; the merged result follows the order of ``views``.
    """
    async def run_view(view) -> Dict[str, Any]:
        out = view(ctx)
        await asyncio.sleep(0)  # cooperate
        return out

    results = await asyncio.gather(*(run_view(v) for v in views))
    merged: Dict[str, Any] = {}
    for out in results:
        merged.update(out)
    return merged


async def budget_progress_many(budgets, trans, reporting_range, now):
    """Evaluate several budgets concurrently; output keeps the input order."""
    trans = tuple(trans)

    async def one(b):
        p = progress(b, trans, reporting_range, now)
        await asyncio.sleep(0)
        return p

    return list(await asyncio.gather(*(one(b) for b in budgets)))
