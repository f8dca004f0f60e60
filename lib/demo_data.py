# =============================================================================
# lib/demo_data.py - Demo Household Generator
# =============================================================================
# Generates realistic-looking Vietnamese household rows for demos, load tests
# and local development. Pass a seed for reproducible output.
#
# Usage:
#   from lib.demo_data import generate_demo_households
#   rows = generate_demo_households(count=20, seed=42)
# =============================================================================

from __future__ import annotations

import random
import uuid
from datetime import datetime, timezone
from typing import Any

FAMILY_NAMES = [
    "Nguyễn", "Trần", "Lê", "Phạm", "Hoàng", "Huỳnh", "Phan", "Vũ", "Võ", "Đặng",
    "Bùi", "Đỗ", "Hồ", "Ngô", "Dương", "Lý", "Mai", "Đinh", "Lương", "Chu",
]

MIDDLE_NAMES = [
    "Văn", "Thị", "Đình", "Minh", "Thu", "Hữu", "Quang", "Tấn", "Thanh", "Hoài",
    "Phương", "Xuân", "Hùng", "Thành", "Đức", "Anh", "Tuấn", "Hải", "Nam", "Long",
]

GIVEN_NAMES = [
    "An", "Bình", "Cường", "Dũng", "Em", "Phong", "Giang", "Hạnh", "Inh", "Khoa",
    "Lan", "Mai", "Nam", "Oanh", "Phúc", "Quỳnh", "Rồng", "Sơn", "Thảo", "Uyên",
    "Vân", "Xuân", "Yến", "Zung", "Linh", "Hương", "Trang", "Hà", "Ly", "Chi",
]

STREETS = [
    "Lê Lợi", "Nguyễn Huệ", "Trần Hưng Đạo", "Hai Bà Trưng", "Điện Biên Phủ",
    "Lê Duẩn", "Võ Văn Kiệt", "Cách Mạng Tháng 8", "Lý Thường Kiệt", "Phan Chu Trinh",
    "Nguyễn Thị Minh Khai", "Lê Văn Việt", "Tô Hiến Thành", "Phạm Ngọc Thạch",
    "Hoàng Diệu", "Lê Công Phép", "Nguyễn Văn Cừ", "Trương Định", "Võ Thị Sáu",
    "Bạch Đằng",
]

DISTRICTS = [
    "Quận 1", "Quận 2", "Quận 3", "Quận 4", "Quận 5", "Quận 6", "Quận 7", "Quận 8",
    "Quận 9", "Quận 10", "Quận 11", "Quận 12", "Bình Thạnh", "Phú Nhuận", "Tân Bình",
    "Tân Phú", "Gò Vấp", "Bình Tân", "Thủ Đức", "Hóc Môn",
]

WARDS = [
    "P. An Lạc", "P. Tân Sơn Nhì", "P. Tây Thạnh", "P. Bình Trị Đông",
    "P. Bình Hưng Hòa", "P. An Lạc A", "P. Tân Tạo", "P. Bình Hưng Hòa A",
    "P. Bình Hưng Hòa B", "P. Tân Tạo A", "P. An Phú", "P. Thảo Điền", "P. Bình An",
    "P. Cát Lái", "P. Thạnh Mỹ Lợi", "P. Bến Nghé", "P. Cô Giang",
    "P. Nguyễn Thái Bình", "P. Phạm Ngũ Lão", "P. Cầu Ông Lãnh",
]

PROVINCE_CODES = ["01", "79", "17", "20", "36", "48", "52", "64", "68", "77"]
WARD_CODES = [str(11500 + i) for i in range(50)]
PHONE_OPERATORS = ["090", "091", "092", "093", "094", "096", "097", "098", "099"]
GENDERS = ["nam", "nu"]

START_DATE = datetime(2023, 1, 1, tzinfo=timezone.utc)


class DemoDataGenerator:
    """Random household generator bound to one random.Random instance."""

    def __init__(self, seed: int | None = None, now: datetime | None = None):
        self.rng = random.Random(seed)
        self.now = now or datetime.now(timezone.utc)

    def new_id(self) -> str:
        return str(uuid.UUID(int=self.rng.getrandbits(128), version=4))

    def name(self) -> str:
        return " ".join((
            self.rng.choice(FAMILY_NAMES),
            self.rng.choice(MIDDLE_NAMES),
            self.rng.choice(GIVEN_NAMES),
        ))

    def address(self) -> str:
        number = self.rng.randint(1, 999)
        sub_number = self.rng.randint(1, 99)
        street = self.rng.choice(STREETS)
        ward = self.rng.choice(WARDS)
        district = self.rng.choice(DISTRICTS)
        return f"{number}/{sub_number} {street}, {ward}, {district}"

    def phone(self) -> str:
        return self.rng.choice(PHONE_OPERATORS) + f"{self.rng.randrange(10_000_000):07d}"

    def birth_year(self) -> int:
        return self.rng.randint(1940, 2005)

    def gender(self) -> str:
        return self.rng.choice(GENDERS)

    def created_at(self) -> datetime:
        return START_DATE + (self.now - START_DATE) * self.rng.random()

    def maybe(self, probability: float, value: Any) -> Any:
        """value with the given probability, else None."""
        return value if self.rng.random() < probability else None

    def household(self) -> dict[str, Any]:
        created_at = self.created_at().isoformat()
        head_name = self.name()
        head = self.maybe(0.9, {"id": self.new_id(), "full_name": head_name})

        return {
            "id": self.new_id(),
            "household_name": f"Gia đình {head_name}",
            "address": self.address(),
            "province_code": self.maybe(0.8, self.rng.choice(PROVINCE_CODES)),
            "ward_code": self.maybe(0.8, self.rng.choice(WARD_CODES)),
            "phone": self.maybe(0.9, self.phone()),
            "notes": self.maybe(0.3, "Ghi chú cho gia đình"),
            "head_of_household_id": head["id"] if head else None,
            "created_by": self.new_id(),
            "created_at": created_at,
            "updated_at": created_at,
            "member_count": self.rng.randint(1, 8),
            "head_of_household": head,
        }


def generate_demo_households(
    count: int = 100,
    seed: int | None = None,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """
    Generate demo household rows.

    Each row has the households table columns plus member_count (1-8) and a
    head_of_household summary (absent for roughly one in ten rows).

    Args:
        count: Number of households
        seed: Seed for reproducible output
        now: Upper bound for created_at (defaults to the current time)
    """
    if count < 0:
        raise ValueError("count must be >= 0")
    generator = DemoDataGenerator(seed=seed, now=now)
    return [generator.household() for _ in range(count)]
