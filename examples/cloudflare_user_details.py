#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio

from laakhay.cloudflare import CloudflareAPI, DeadlineExceededError, RequestContext


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Show the authenticated Cloudflare user")
    p.add_argument("--timeout", type=float, default=10.0)
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    async with CloudflareAPI.from_env() as api:
        print(f"Auth mode  : {api.auth_type.value}")
        try:
            user = await api.user_details(ctx=RequestContext.with_timeout(args.timeout))
        except DeadlineExceededError:
            print(f"No response within {args.timeout}s")
            return
    print(f"User ID    : {user.id}")
    print(f"Email      : {user.email}")
    print(f"2FA        : {user.two_factor_authentication_enabled}")


if __name__ == "__main__":
    asyncio.run(main())
