#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging

from laakhay.cloudflare import CloudflareAPI, RequestContext


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="List Cloudflare zones page by page")
    p.add_argument("--per-page", type=int, default=20)
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--timeout", type=float, default=30.0)
    p.add_argument("--debug", action="store_true")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    async with CloudflareAPI.from_env() as api:
        with RequestContext.with_timeout(args.timeout) as ctx:
            page = await api.list_zones(page=args.page, per_page=args.per_page, ctx=ctx)

    info = page.result_info
    print("=" * 65)
    print(f"Page        : {info.page}/{info.total_pages}")
    print(f"Zones       : {info.count} of {info.total}")
    print(f"Consistent  : {page.consistent}")
    print("=" * 65)
    print(f"{'ID':34} | {'Name':20} | {'Status':8}")
    print("-" * 65)
    for z in page.items:
        print(f"{z.id:34} | {z.name:20} | {z.status:8}")
    print("=" * 65)


if __name__ == "__main__":
    asyncio.run(main())
