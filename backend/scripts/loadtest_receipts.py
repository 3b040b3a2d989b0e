"""Load test: hammer a running server with concurrent receipt submissions.

Posts ``--receipts`` copies of a sample receipt from ``--workers``
concurrent clients, then fetches the points for every returned id and
checks each one scores the expected value. Reports throughput and
latency percentiles.

Safeguards:
  - Requires env var ALLOW_DEV_LOADTEST=1 to run.

Usage:
  ALLOW_DEV_LOADTEST=1 python scripts/loadtest_receipts.py \
      [--base-url http://localhost:8080] [--receipts 500] [--workers 20]
"""
from __future__ import annotations

import argparse
import asyncio
import os
import statistics
import sys
import time
from typing import List, Tuple

import httpx

SAMPLE_RECEIPT = {
    "retailer": "M&M Corner Market",
    "purchaseDate": "2022-03-20",
    "purchaseTime": "14:33",
    "items": [{"shortDescription": "Gatorade", "price": "2.25"} for _ in range(4)],
    "total": "9.00",
}
EXPECTED_POINTS = 109


def guard() -> None:
    if os.environ.get("ALLOW_DEV_LOADTEST") != "1":
        print("Refusing to run. Set ALLOW_DEV_LOADTEST=1 to proceed.", file=sys.stderr)
        sys.exit(2)


async def _timed(coro) -> Tuple[httpx.Response, float]:
    start = time.perf_counter()
    resp = await coro
    return resp, (time.perf_counter() - start) * 1000


async def run(base_url: str, receipts: int, workers: int) -> int:
    limits = httpx.Limits(max_connections=workers, max_keepalive_connections=workers)
    sem = asyncio.Semaphore(workers)
    latencies: List[float] = []

    async with httpx.AsyncClient(base_url=base_url, limits=limits, timeout=30.0) as client:

        async def submit() -> str:
            async with sem:
                resp, ms = await _timed(client.post("/receipts/process", json=SAMPLE_RECEIPT))
            latencies.append(ms)
            resp.raise_for_status()
            return resp.json()["id"]

        async def points(receipt_id: str) -> int:
            async with sem:
                resp, ms = await _timed(client.get(f"/receipts/{receipt_id}/points"))
            latencies.append(ms)
            resp.raise_for_status()
            return resp.json()["points"]

        started = time.perf_counter()
        ids = await asyncio.gather(*(submit() for _ in range(receipts)))
        scores = await asyncio.gather(*(points(rid) for rid in ids))
        elapsed = time.perf_counter() - started

    wrong = sum(1 for s in scores if s != EXPECTED_POINTS)
    duplicates = len(ids) - len(set(ids))
    ordered = sorted(latencies)
    print(f"requests={len(latencies)} elapsed={elapsed:.2f}s rps={len(latencies) / elapsed:.1f}")
    print(
        f"latency_ms mean={statistics.mean(ordered):.2f} "
        f"p50={ordered[len(ordered) // 2]:.2f} p95={ordered[int(len(ordered) * 0.95) - 1]:.2f}"
    )
    print(f"duplicate_ids={duplicates} wrong_scores={wrong}")
    return 1 if (wrong or duplicates) else 0


def main() -> None:
    guard()
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--base-url", default=os.environ.get("RECEIPTS_BASE_URL", "http://localhost:8080"))
    parser.add_argument("--receipts", type=int, default=500)
    parser.add_argument("--workers", type=int, default=20)
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args.base_url, args.receipts, args.workers)))


if __name__ == "__main__":
    main()
