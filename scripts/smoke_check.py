"""Smoke-check a running relay: health, Paystack connectivity, optional verify."""

import argparse
import asyncio
import json
import sys
from uuid import uuid4

import httpx


async def check(base_url: str, reference: str | None, timeout: float) -> bool:
    """Hit each probe once and print status code plus body; True when all pass."""

    ok = True
    async with httpx.AsyncClient(base_url=base_url, timeout=timeout) as client:
        calls = [("GET", "/health", None), ("GET", "/test-paystack", None)]
        if reference:
            calls.append(("POST", "/verify-payment", {"reference": reference}))
        for method, path, body in calls:
            try:
                resp = await client.request(
                    method,
                    path,
                    json=body,
                    headers={"x-correlation-id": str(uuid4())},
                )
            except httpx.HTTPError as exc:
                print(f"{method} {path} -> transport error: {exc}")
                ok = False
                continue
            print(f"{method} {path} -> {resp.status_code}")
            print(json.dumps(resp.json(), indent=2))
            ok = ok and resp.is_success
    return ok


def main() -> None:
    """Parse CLI args and run the smoke check."""

    parser = argparse.ArgumentParser(description="Smoke-check a running payment relay.")
    parser.add_argument("--base-url", default="http://localhost:3000")
    parser.add_argument("--reference", help="Verify this Paystack reference as well")
    parser.add_argument("--timeout", type=float, default=30.0)
    args = parser.parse_args()
    sys.exit(0 if asyncio.run(check(args.base_url, args.reference, args.timeout)) else 1)


if __name__ == "__main__":
    main()
