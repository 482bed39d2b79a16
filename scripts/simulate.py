"""
Cafe Rush Simulation Script

Fires a burst of concurrent orders at a running API, then walks some of
them through the status lifecycle and prints the sales report.
Run from project root (with the API running): python scripts/simulate.py
"""

import asyncio
import random
import time
import argparse
from datetime import datetime
from typing import Any, Optional

import httpx

# Configuration
API_BASE_URL = "http://localhost:8001"
TOTAL_ORDERS = 30

CUSTOMER_NAMES = ["Ali", "Sara", "Omar", "Lina", "Youssef", "Maya", "Karim", "Nour", "Adam", "Hana"]
INSTRUCTIONS = [None, None, "Extra hot", "Less sugar", "Oat milk", "No ice"]
NEXT_STATUS = {"pending": "inProgress", "inProgress": "completed"}


def generate_order_payload(drink_ids: list[str]) -> dict[str, Any]:
    """Generate a random dine-in or take-away order."""
    is_take_away = random.random() < 0.4
    items = [
        {
            "drink_id": random.choice(drink_ids),
            "quantity": random.randint(1, 3),
            "special_instructions": random.choice(INSTRUCTIONS),
        }
        for _ in range(random.randint(1, 3))
    ]
    return {
        "customer_name": random.choice(CUSTOMER_NAMES),
        "items": items,
        "notes": random.choice([None, "Birthday", "Window seat"]),
        "table_number": None if is_take_away else str(random.randint(1, 12)),
        "is_take_away": is_take_away,
    }


async def send_order(
    client: httpx.AsyncClient,
    order_num: int,
    drink_ids: list[str],
) -> dict[str, Any]:
    """Place one order and time the request."""
    payload = generate_order_payload(drink_ids)
    start_time = time.time()

    try:
        response = await client.post(f"{API_BASE_URL}/api/orders", json=payload, timeout=30.0)
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 201:
            data = response.json()
            return {
                "order_num": order_num,
                "success": True,
                "order_id": data["id"],
                "total": data["total_price"],
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


async def advance_order(client: httpx.AsyncClient, order_id: str) -> Optional[str]:
    """Move an order one step along pending -> inProgress -> completed."""
    response = await client.get(f"{API_BASE_URL}/api/orders/{order_id}")
    response.raise_for_status()
    status = NEXT_STATUS.get(response.json()["status"])
    if status is None:
        return None

    response = await client.patch(
        f"{API_BASE_URL}/api/orders/{order_id}/status",
        json={"status": status},
    )
    response.raise_for_status()
    return status


async def run_simulation(num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    """Run the rush simulation and print a report."""
    print("=" * 70)
    print("☕ CAFE RUSH SIMULATION")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient() as client:
        response = await client.get(f"{API_BASE_URL}/api/drinks")
        response.raise_for_status()
        drink_ids = [d["id"] for d in response.json()["drinks"]]

        tasks = [send_order(client, i + 1, drink_ids) for i in range(num_orders)]
        results = await asyncio.gather(*tasks)

        successful = [r for r in results if r["success"]]
        failed = [r for r in results if not r["success"]]

        # Push roughly half the orders forward, some all the way to completed
        for result in successful[: len(successful) // 2]:
            await advance_order(client, result["order_id"])
            if random.random() < 0.5:
                await advance_order(client, result["order_id"])

        sales = (await client.get(f"{API_BASE_URL}/api/sales/summary")).json()
        stats = (await client.get(f"{API_BASE_URL}/api/orders/stats")).json()
        popular = (await client.get(f"{API_BASE_URL}/api/drinks/popular")).json()

    total_time = round(time.time() - start_time, 2)

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        print(f"\n📈 Average Response: {avg_time}s")

    print(f"\n💰 Sales today: ${sales['today']:.2f} | week: ${sales['week']:.2f} | month: ${sales['month']:.2f}")
    print(f"📦 Orders by status: {stats['counts']}")
    print("\n🏆 Popular drinks:")
    for entry in popular:
        print(f"   {entry['quantity']:>3}x {entry['drink']['name']}")

    if failed:
        print("\n⚠️  Failed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Cafe Rush Simulation")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--url", default=API_BASE_URL, help="API base URL")
    args = parser.parse_args()

    API_BASE_URL = args.url
    asyncio.run(run_simulation(args.orders))
