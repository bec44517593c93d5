#!/usr/bin/env python3
"""
Script to create or update the subscription plan catalog.
Usage: python seed_plans.py
"""

import asyncio
import logging

from app.core.config import settings
from app.db.database import SessionLocal
from app.db.seed import seed_plans
from app.infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl
import app.infrastructure.orm  # noqa: F401


async def main():
    db = SessionLocal()
    try:
        plans = await seed_plans(UnitOfWorkImpl(db), settings)
    finally:
        db.close()

    for plan in plans:
        print(f"  {plan.name:<16} {plan.price:>8} {plan.interval.value:<8} {plan.stripe_price_id or '-'}")
    print(f"Seeded {len(plans)} plans")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    asyncio.run(main())
