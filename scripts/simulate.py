"""
Storefront Simulation Script

Fires concurrent customer sessions (browse -> cart -> checkout) at a
running server to exercise the order flow end to end.
Run from project root: python scripts/simulate.py --orders 50

Version: 1.0.0
"""

import argparse
import asyncio
import os
import random
import sys
import time
from datetime import datetime
from typing import Any

import httpx

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:3000"
TOTAL_ORDERS = 50

# Sample data for random customers
FIRST_NAMES = ["Ivan", "Anna", "Dmitry", "Olga", "Sergey", "Maria", "Alexei", "Elena", "Pavel", "Irina"]
LAST_NAMES = ["Petrov", "Ivanova", "Smirnov", "Kuznetsova", "Popov", "Volkova", "Sokolov", "Morozova"]


def generate_random_customer() -> dict[str, Any]:
    """Generate checkout details for a random customer."""
    return {
        "name": f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}",
        "phone": f"+7 (9{random.randint(10, 99)}) {random.randint(100, 999)}-{random.randint(10, 99)}-{random.randint(10, 99)}",
        "email": random.choice([None, "customer@example.com"]),
        "pickup_time": random.choice([15, 30, 45, 60]),
    }


async def load_menu(client: httpx.AsyncClient) -> dict[str, list[dict]]:
    """Menus of all active restaurants that sell something."""
    response = await client.get(f"{API_BASE_URL}/api/restaurants/active")
    response.raise_for_status()

    menus = {}
    for restaurant in response.json():
        products = await client.get(f"{API_BASE_URL}/api/products/restaurant/{restaurant['id']}")
        products.raise_for_status()
        if products.json():
            menus[restaurant["id"]] = products.json()
    return menus


async def run_customer(
    client: httpx.AsyncClient,
    order_num: int,
    menus: dict[str, list[dict]],
) -> dict[str, Any]:
    """One customer session: create cart, add 1-4 products, check out."""
    restaurant_id = random.choice(list(menus))
    start_time = time.time()

    try:
        cart = (await client.post(f"{API_BASE_URL}/api/carts")).json()

        for product in random.sample(menus[restaurant_id], k=min(len(menus[restaurant_id]), random.randint(1, 4))):
            response = await client.post(
                f"{API_BASE_URL}/api/carts/{cart['id']}/items",
                json={
                    "product_id": product["id"],
                    "quantity": random.randint(1, 3),
                    "restaurant_id": restaurant_id,
                },
            )
            response.raise_for_status()

        response = await client.post(
            f"{API_BASE_URL}/api/carts/{cart['id']}/checkout",
            json=generate_random_customer(),
            timeout=30.0,
        )
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 200:
            order = response.json()["order"]
            return {
                "order_num": order_num,
                "success": True,
                "order_id": order["id"],
                "restaurant_id": restaurant_id,
                "total": order["total_amount"],
                "time": elapsed,
            }
        return {
            "order_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
        }
    except httpx.HTTPError as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": elapsed,
        }


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    """
    Run the storefront simulation.

    Args:
        num_orders: Number of concurrent customer sessions
    """
    print("=" * 70)
    print("🔥 STOREFRONT SIMULATION - CONCURRENT CHECKOUTS")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient(timeout=10.0) as client:
        menus = await load_menu(client)
        if not menus:
            print("\n❌ No active restaurant has products - seed the store first")
            return {"total": num_orders, "successful": 0, "failed": num_orders, "results": []}

        print(f"\n🚀 Firing orders at {len(menus)} restaurants...\n")
        tasks = [run_customer(client, i + 1, menus) for i in range(num_orders)]
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)

    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        total_revenue = sum(r.get("total", 0) for r in successful)
        per_restaurant: dict[str, int] = {}
        for r in successful:
            per_restaurant[r["restaurant_id"]] = per_restaurant.get(r["restaurant_id"], 0) + 1

        print("\n📈 Performance Metrics:")
        print(f"   Average Session: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   💰 Total Revenue: {total_revenue:.2f}₽")
        print(f"   🏪 Orders per restaurant: {per_restaurant}")

    if failed:
        print("\n⚠️  Failed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("\n" + "=" * 70)
    print("🔍 VERIFICATION STEPS")
    print("=" * 70)
    print("1. Check Celery terminal - all export tasks should complete")
    print("2. Run: python scripts/verify.py")
    print(f"3. Visit {API_BASE_URL}/dashboard to see results")
    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


async def check_health() -> bool:
    """Check the server is up before firing orders."""
    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{API_BASE_URL}/health")
        except httpx.HTTPError as e:
            print(f"❌ Server not reachable: {e}")
            return False

    data = response.json()
    print(f"🩺 Health: {data.get('status')} (storage={data.get('storage')}, redis={data.get('redis')})")
    return response.status_code == 200


def main() -> None:
    global API_BASE_URL

    parser = argparse.ArgumentParser(description="Storefront checkout simulation")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--base-url", default=API_BASE_URL, help="Server base URL")
    args = parser.parse_args()

    API_BASE_URL = args.base_url.rstrip("/")

    if not asyncio.run(check_health()):
        sys.exit(1)
    asyncio.run(run_simulation(args.orders))


if __name__ == "__main__":
    main()
