# =============================================================================
# lib/vietnam_data.py - Vietnamese Administrative Divisions
# =============================================================================
# Loads the province and ward reference data used for household addresses
# and member hometowns. Data is two JSON objects keyed by code:
#   province.json: {"01": {"name", "slug", "type", "name_with_type", "code"}}
#   ward.json:     {"00004": {..., "path", "path_with_type", "parent_code"}}
#
# The bundled lib/data/ files are a small sample; point ADMIN_DIVISIONS_DIR
# at a directory with the full dataset in production.
#
# Usage:
#   from lib.vietnam_data import get_vietnam_data, format_address
#   wards = get_vietnam_data().get_wards_by_province("79")
# =============================================================================

from __future__ import annotations

import json
import logging
import unicodedata
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel

from app.config import settings

logger = logging.getLogger(__name__)

BUNDLED_DATA_DIR = Path(__file__).parent / "data"


class Province(BaseModel):
    """A province-level unit (tỉnh / thành phố)."""
    name: str
    slug: str
    type: str
    name_with_type: str
    code: str


class Ward(BaseModel):
    """A ward-level unit (phường / xã), parented directly by a province."""
    name: str
    slug: str
    type: str
    name_with_type: str
    path: str
    path_with_type: str
    code: str
    parent_code: str


def vietnamese_sort_key(value: str) -> str:
    """
    Collation key that orders Vietnamese names the way a reader expects.

    Diacritics are stripped and Đ is folded to D so "Đà Nẵng" sorts among
    the D names instead of after Z.
    """
    folded = value.replace("Đ", "D").replace("đ", "d")
    decomposed = unicodedata.normalize("NFD", folded)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


class VietnamData:
    """In-memory index of provinces and wards."""

    def __init__(self, provinces: dict[str, Province], wards: dict[str, Ward]):
        self.provinces = provinces
        self.wards = wards

    @classmethod
    def from_directory(cls, directory: str | Path) -> "VietnamData":
        """
        Load province.json and ward.json from a directory.

        Raises:
            FileNotFoundError: If either file is missing
            ValueError: If the JSON is malformed
        """
        directory = Path(directory)
        with open(directory / "province.json", encoding="utf-8") as f:
            raw_provinces = json.load(f)
        with open(directory / "ward.json", encoding="utf-8") as f:
            raw_wards = json.load(f)

        provinces = {code: Province(**row) for code, row in raw_provinces.items()}
        wards = {code: Ward(**row) for code, row in raw_wards.items()}

        logger.info(
            f"Loaded {len(provinces)} provinces and {len(wards)} wards from {directory}"
        )
        return cls(provinces, wards)

    def get_provinces(self) -> list[Province]:
        """All provinces sorted by name."""
        return sorted(self.provinces.values(), key=lambda p: vietnamese_sort_key(p.name))

    def get_wards_by_province(self, province_code: str) -> list[Ward]:
        """Wards whose parent_code is the given province, sorted by name."""
        wards = [w for w in self.wards.values() if w.parent_code == province_code]
        return sorted(wards, key=lambda w: vietnamese_sort_key(w.name))

    def get_province_by_code(self, code: str | None) -> Province | None:
        if not code:
            return None
        return self.provinces.get(code)

    def get_ward_by_code(self, code: str | None) -> Ward | None:
        if not code:
            return None
        return self.wards.get(code)

    def format_address(
        self,
        address: str | None,
        province_code: str | None = None,
        ward_code: str | None = None,
        fallback: str = "",
    ) -> str:
        """
        Join street address, ward and province into one display line.

        Empty parts are skipped; unknown codes are ignored.

        Example:
            format_address("12 Lê Lợi", "79", "26734")
            # "12 Lê Lợi, Phường Sài Gòn, Thành phố Hồ Chí Minh"
        """
        parts = []
        if address:
            parts.append(address)
        ward = self.get_ward_by_code(ward_code)
        if ward:
            parts.append(ward.name_with_type)
        province = self.get_province_by_code(province_code)
        if province:
            parts.append(province.name_with_type)
        return ", ".join(parts) or fallback


@lru_cache
def get_vietnam_data() -> VietnamData:
    """Load the configured dataset once per process."""
    directory = settings.ADMIN_DIVISIONS_DIR or BUNDLED_DATA_DIR
    return VietnamData.from_directory(directory)


def format_address(
    address: str | None,
    province_code: str | None = None,
    ward_code: str | None = None,
    fallback: str = "",
) -> str:
    """Module-level shortcut for get_vietnam_data().format_address()."""
    return get_vietnam_data().format_address(address, province_code, ward_code, fallback)
