#!/usr/bin/env python3
"""Print the commerce project resource."""

import asyncio
import json
import sys

from dotenv import load_dotenv

load_dotenv()

from commerce import CommerceError  # noqa: E402
from storefront.core.clients import build_commerce_client  # noqa: E402


async def main() -> int:
    client = build_commerce_client()
    try:
        project = await client.get("")
    except CommerceError as e:
        print(f"❌ Error fetching project info: {e}")
        return 1
    finally:
        await client.close()

    print("✅ Project info:")
    print(json.dumps(project, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
