#!/usr/bin/env python3
"""
Kupo Script Client - Infrastructure Test

Fetches a script from your Kupo instance and checks that its recomputed
hash matches the hash it was requested by.

Usage:
    python main.py [SCRIPT_HASH]
"""

import argparse
import asyncio
import logging
import sys

from config.settings import settings
from kupo_scripts import ScriptError
from kupo_scripts.indexer import KupoClient, KupoError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Minswap V1 order validator (Plutus V1)
DEFAULT_SCRIPT_HASH = "c620c56751448d1a92184c8f506a4d1f31fc53e55fdd694c8bcda6fa"


async def test_infrastructure(script_hash: str) -> bool:
    """
    Test the infrastructure setup:
    1. Fetch the script from Kupo
    2. Recompute its hash
    """
    print("=" * 60)
    print("Kupo Script Client - Infrastructure Test")
    print("=" * 60)
    print()

    # Show configuration
    print(f"Kupo URL: {settings.kupo_url}")
    print(f"Script hash: {script_hash}")
    print()

    client = KupoClient(url=settings.kupo_url, timeout=settings.kupo_timeout)

    # Test 1: Fetch
    print("[1/2] Fetching script...")
    try:
        script = await client.fetch_script(script_hash)
    except KupoError as e:
        print(f"❌ FAILED: {e}")
        print()
        print("Troubleshooting:")
        print("  1. Is Kupo running and synced?")
        print(f"  2. Is Kupo accessible at {settings.kupo_url}?")
        print("  3. Check firewall/network settings")
        return False
    except ScriptError as e:
        print(f"❌ FAILED: unexpected response: {e}")
        return False

    if script is None:
        print("❌ FAILED: Kupo does not know this script")
        print("  Kupo only indexes scripts seen in the blocks it has synced.")
        return False
    print(f"✅ Fetched {script}")

    # Test 2: Hash
    print()
    print("[2/2] Recomputing script hash...")
    try:
        computed = script.hash_hex()
    except ScriptError as e:
        print(f"❌ FAILED: {e}")
        return False
    if computed != script_hash.lower():
        print(f"❌ FAILED: hash mismatch, got {computed}")
        return False
    print(f"✅ Hash matches: {computed}")

    print()
    print("=" * 60)
    print("✅ All infrastructure tests passed!")
    print("=" * 60)
    return True


async def main(argv=None):
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Fetch a script from Kupo and verify its hash")
    parser.add_argument("script_hash", nargs="?", default=DEFAULT_SCRIPT_HASH)
    args = parser.parse_args(argv)

    try:
        success = await test_infrastructure(args.script_hash)
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception("Unexpected error")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
