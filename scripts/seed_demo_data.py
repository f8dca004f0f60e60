#!/usr/bin/env python3
# =============================================================================
# scripts/seed_demo_data.py - Seed Demo Households
# =============================================================================
# Inserts generated households, each with a head of household, for one user.
# Uses the service-role client, so the target database must already have the
# create_household_with_head function.
#
# Usage:
#   poetry run python scripts/seed_demo_data.py <user_id> [--count 20] [--seed 42]
#
# Prerequisites:
#   - Environment variables must be set (.env file)
# =============================================================================

import argparse
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.exceptions import DuplicatePhoneError
from core.models.household import HeadOfHouseholdCreate, HouseholdCreate
from core.services.household_service import HouseholdService
from lib.demo_data import DemoDataGenerator

logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
logger = logging.getLogger("seed_demo_data")


def seed(user_id: str, count: int, seed_value: int | None) -> int:
    """Insert count households for user_id. Returns how many were created."""
    generator = DemoDataGenerator(seed=seed_value)
    created = 0

    for _ in range(count):
        row = generator.household()
        head_name = row["household_name"].removeprefix("Gia đình ")

        household = HouseholdCreate(
            household_name=row["household_name"],
            address=row["address"],
            province_code=row["province_code"],
            ward_code=row["ward_code"],
            phone=row["phone"],
            notes=row["notes"],
        )
        head = HeadOfHouseholdCreate(
            full_name=head_name,
            birth_year=generator.birth_year(),
            gender=generator.gender(),
            use_same_address=True,
        )

        try:
            result = HouseholdService.create_household_with_head(household, head, user_id)
        except DuplicatePhoneError:
            logger.warning(f"Skipping {row['household_name']}: phone {row['phone']} in use")
            continue

        created += 1
        logger.info(f"Created {result['household']['display_name']}")

    return created


def main():
    parser = argparse.ArgumentParser(description="Seed demo households for a user")
    parser.add_argument("user_id", help="auth.users id that will own the households")
    parser.add_argument("--count", type=int, default=20, help="Number of households")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args()

    print("=" * 60)
    print("Family Registry - Demo Data")
    print("=" * 60)

    created = seed(args.user_id, args.count, args.seed)

    print()
    print(f"Created {created}/{args.count} households")


if __name__ == "__main__":
    main()
