"""
Concurrent Request Demo

Issues a search and a batch lookup at the same time on one client and
prints each response from its completion callback.

Requires FDC_API_KEY (the public DEMO_KEY works for a few calls):

    FDC_API_KEY=DEMO_KEY python demo.py
"""

import asyncio
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from fdc_client.api import FoodDataClient, FoodDataResponse, SearchField, SortOrder
from fdc_client.exceptions import ConfigurationError
from fdc_client.main import setup_logging


def report(label: str):
    """Build a callback that prints one response."""
    def callback(response: FoodDataResponse) -> None:
        print(f"\n[{label}] {response.url}")
        if response.error is not None:
            print(f"      [X] Transport error: {response.error}")
            return
        print(f"      HTTP {response.status_code} in {response.elapsed_ms:.0f}ms")
        print(f"      {response.body[:200]}")
    return callback


async def demonstrate_requests() -> None:
    """Run a search and a lookup concurrently."""
    async with FoodDataClient.from_env() as client:
        await asyncio.gather(
            client.search(
                "cheddar cheese",
                data_type="Branded",
                page_size=3,
                sort_by=SearchField.SCORE,
                sort_order=SortOrder.DESCENDING,
                callback=report("search")
            ),
            client.get_foods(["534358", "373052"], callback=report("foods")),
        )


if __name__ == "__main__":
    setup_logging("INFO")
    print("=" * 60)
    print("FoodData Central Demo")
    print("=" * 60)
    try:
        asyncio.run(demonstrate_requests())
    except ConfigurationError as e:
        print(f"[X] {e}")
        sys.exit(2)
