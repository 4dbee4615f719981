#!/usr/bin/env python3
"""Print the first product projections with price selection applied."""

import argparse
import asyncio
import json

from dotenv import load_dotenv

load_dotenv()

from storefront.core.clients import build_commerce_client  # noqa: E402


async def main(limit: int, currency: str) -> None:
    client = build_commerce_client()
    try:
        page = await client.get(
            "/product-projections",
            {"limit": limit, "priceCurrency": currency, "staged": False},
        )
    finally:
        await client.close()
    print(json.dumps(page, indent=2))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--limit", type=int, default=5)
    parser.add_argument("--currency", default="USD")
    args = parser.parse_args()
    asyncio.run(main(args.limit, args.currency))
