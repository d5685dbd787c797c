#!/usr/bin/env python3
"""Benchmark access evaluation: latency (p50, p95, p99) and QPS.

Usage:
    export API_URL=http://localhost:8000 KEYCLOAK_URL=http://localhost:8080 \\
        KEYCLOAK_CLIENT_SECRET=... BENCH_USER=... BENCH_PASSWORD=...
    python scripts/bench_evaluate.py [--num-requests 500] [--resource-type DOCUMENT --action READ]

Every request writes an audit entry, so this also measures audit insert cost.
"""
from __future__ import annotations

import argparse
import os
import statistics
import sys
import time

import httpx


def get_token(
    keycloak_url: str,
    realm: str,
    client_id: str,
    client_secret: str,
    username: str,
    password: str,
) -> str:
    url = f"{keycloak_url.rstrip('/')}/realms/{realm}/protocol/openid-connect/token"
    r = httpx.post(
        url,
        data={
            "grant_type": "password",
            "client_id": client_id,
            "client_secret": client_secret,
            "username": username,
            "password": password,
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        timeout=30.0,
    )
    r.raise_for_status()
    return r.json()["access_token"]


def percentile(sorted_values: list[float], q: float) -> float:
    idx = max(0, min(len(sorted_values) - 1, round(q * len(sorted_values)) - 1))
    return sorted_values[idx]


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark POST /v1/access/evaluate")
    parser.add_argument("--num-requests", type=int, default=200, help="Number of evaluate requests")
    parser.add_argument("--resource-type", default="DOCUMENT")
    parser.add_argument("--action", default="READ")
    parser.add_argument("--output", type=str, default="/results/bench_evaluate.txt", help="Output file path")
    args = parser.parse_args()

    api_url = os.environ.get("API_URL", "http://localhost:8000").rstrip("/")
    keycloak_url = os.environ.get("KEYCLOAK_URL", "http://localhost:8080")
    realm = os.environ.get("KEYCLOAK_REALM", "gatekeeper")
    client_id = os.environ.get("KEYCLOAK_CLIENT_ID", "gatekeeper-api")
    client_secret = os.environ.get("KEYCLOAK_CLIENT_SECRET", "")
    user = os.environ.get("BENCH_USER", "testuser")
    password = os.environ.get("BENCH_PASSWORD", "testpass")

    print("Getting token...")
    token = get_token(keycloak_url, realm, client_id, client_secret, user, password)
    headers = {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}
    payload = {"resource_type": args.resource_type, "action": args.action}

    latencies: list[float] = []
    allowed = denied = errors = 0
    print(f"Running {args.num_requests} evaluate requests...")
    start_total = time.perf_counter()
    with httpx.Client(timeout=30.0) as client:
        for _ in range(args.num_requests):
            t0 = time.perf_counter()
            r = client.post(f"{api_url}/v1/access/evaluate", json=payload, headers=headers)
            elapsed = time.perf_counter() - t0
            if r.status_code == 200:
                allowed += 1
            elif r.status_code == 403:
                denied += 1
            else:
                errors += 1
                continue
            latencies.append(elapsed)
    total_elapsed = time.perf_counter() - start_total

    n = len(latencies)
    if n == 0:
        print("No successful evaluations.")
        return 1

    latencies.sort()
    qps = n / total_elapsed
    p50 = statistics.median(latencies) * 1000
    p95 = percentile(latencies, 0.95) * 1000
    p99 = percentile(latencies, 0.99) * 1000

    summary = (
        f"Evaluate benchmark ({args.resource_type}:{args.action}, requests={n}, "
        f"allowed={allowed}, denied={denied}, errors={errors})\n"
        f"  QPS: {qps:.2f}\n"
        f"  Latency: p50={p50:.1f} ms, p95={p95:.1f} ms, p99={p99:.1f} ms\n"
        f"  Total time: {total_elapsed:.2f} s\n"
    )
    print(summary)

    try:
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(summary)
        print(f"Wrote {args.output}")
    except OSError as e:
        print(f"Could not write {args.output}: {e}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
