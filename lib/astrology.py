# =============================================================================
# lib/astrology.py - Vietnamese Zodiac Lookups
# =============================================================================
# Deterministic lookups used on member rosters:
# - Can Chi (heavenly stem + earthly branch) of a birth year
# - Tuổi mụ (nominal age: the year of birth counts as age 1)
# - Sao chiếu mệnh (ruling star, 9-year cycle, differs by gender)
# - Vận hạn (8-year hạn cycle, Diêm Vương and Tam Tai years)
#
# Every function takes an explicit current_year so results are reproducible;
# it defaults to the current calendar year.
#
# Usage:
#   from lib.astrology import get_can_chi, get_van_han
#   get_can_chi(1990)                       # "Canh Ngọ"
#   get_van_han(1990, "nam", current_year=2025).sao
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import date
from typing import Any


# =============================================================================
# Lookup Tables
# =============================================================================

# Indexed by year % 10 (year 0 would be Canh)
THIEN_CAN = [
    "Canh", "Tân", "Nhâm", "Quý", "Giáp",
    "Ất", "Bính", "Đinh", "Mậu", "Kỷ",
]

# Indexed by year % 12 (year 0 would be Thân)
DIA_CHI = [
    "Thân", "Dậu", "Tuất", "Hợi", "Tý", "Sửu",
    "Dần", "Mão", "Thìn", "Tỵ", "Ngọ", "Mùi",
]

# Ruling stars for remainders 1..9 of nominal age mod 9 (0 counts as 9)
SAO_NAM = [
    "La Hầu", "Thổ Tú", "Thủy Diệu", "Thái Bạch", "Thái Dương",
    "Vân Hán", "Kế Đô", "Thái Âm", "Mộc Đức",
]

SAO_NU = [
    "Kế Đô", "Vân Hán", "Mộc Đức", "Thái Âm", "Thổ Tú",
    "La Hầu", "Thái Dương", "Thái Bạch", "Thủy Diệu",
]

# Hạn for remainders 1..8 of nominal age mod 8 (0 counts as 8)
HAN_8_NAM = [
    "Huỳnh Tuyền", "Tam Kheo", "Tam Tai", "Thiên Tinh",
    "Toán Tận", "Ngũ Mộ", "Thiên La", "Địa Võng",
]

# Tam Hợp groups -> the three branch-years that are Tam Tai for that group
TAM_TAI = {
    "Thân": ("Dần", "Mão", "Thìn"),
    "Tý": ("Dần", "Mão", "Thìn"),
    "Thìn": ("Dần", "Mão", "Thìn"),
    "Dần": ("Thân", "Dậu", "Tuất"),
    "Ngọ": ("Thân", "Dậu", "Tuất"),
    "Tuất": ("Thân", "Dậu", "Tuất"),
    "Hợi": ("Tỵ", "Ngọ", "Mùi"),
    "Mão": ("Tỵ", "Ngọ", "Mùi"),
    "Mùi": ("Tỵ", "Ngọ", "Mùi"),
    "Tỵ": ("Hợi", "Tý", "Sửu"),
    "Dậu": ("Hợi", "Tý", "Sửu"),
    "Sửu": ("Hợi", "Tý", "Sửu"),
}

MALE = "nam"


@dataclass(frozen=True)
class VanHan:
    """Luck-cycle reading for one person in one year."""
    sao: str
    han: str
    diem_vuong: bool
    tam_tai: bool
    tuoi_mu: int
    chi: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# =============================================================================
# Helpers
# =============================================================================

def _validate_year(year: Any, name: str = "year") -> int:
    # bool is an int subclass; a True birth year is a caller bug
    if isinstance(year, bool) or not isinstance(year, int):
        raise ValueError(f"{name} must be an integer, got {year!r}")
    if year < 1:
        raise ValueError(f"{name} must be positive, got {year}")
    return year


def _resolve_current_year(current_year: int | None) -> int:
    if current_year is None:
        return date.today().year
    return _validate_year(current_year, "current_year")


def _cycle_index(value: int, cycle: int) -> int:
    """Zero-based table index for a 1..cycle remainder where 0 wraps to cycle."""
    remainder = value % cycle
    if remainder == 0:
        remainder = cycle
    return remainder - 1


# =============================================================================
# Public API
# =============================================================================

def get_chi(year: int) -> str:
    """Earthly branch (con giáp) of a year."""
    return DIA_CHI[_validate_year(year) % 12]


def get_can_chi(year: int) -> str:
    """
    Heavenly stem and earthly branch of a year.

    Example:
        get_can_chi(1984)  # "Giáp Tý"
        get_can_chi(2000)  # "Canh Thìn"
    """
    year = _validate_year(year)
    return f"{THIEN_CAN[year % 10]} {DIA_CHI[year % 12]}"


def get_tuoi(birth_year: int, current_year: int | None = None) -> int:
    """Nominal (lunar) age: current_year - birth_year + 1."""
    birth_year = _validate_year(birth_year, "birth_year")
    return _resolve_current_year(current_year) - birth_year + 1


def get_calendar_age(birth_year: int, current_year: int | None = None) -> int:
    """Plain calendar age: current_year - birth_year."""
    birth_year = _validate_year(birth_year, "birth_year")
    return _resolve_current_year(current_year) - birth_year


def get_sao_chieu_menh(
    birth_year: int,
    gender: str | None,
    current_year: int | None = None,
) -> str:
    """
    Ruling star for the year.

    Uses the male table when gender is "nam"; any other value (including
    None) uses the female table.
    """
    tuoi_mu = get_tuoi(birth_year, current_year)
    table = SAO_NAM if gender == MALE else SAO_NU
    return table[_cycle_index(tuoi_mu, 9)]


def is_tam_tai(birth_year: int, current_year: int | None = None) -> bool:
    """True when the current year's branch falls in the birth branch's Tam Tai group."""
    chi = get_chi(birth_year)
    current_chi = DIA_CHI[_resolve_current_year(current_year) % 12]
    return current_chi in TAM_TAI.get(chi, ())


def get_van_han(
    birth_year: int,
    gender: str | None,
    current_year: int | None = None,
) -> VanHan:
    """
    Full luck-cycle reading.

    Returns:
        VanHan with:
        - sao: ruling star (9-year cycle)
        - han: hạn from the 8-year cycle
        - diem_vuong: True when nominal age is a multiple of 8
        - tam_tai: True in one of the three Tam Tai years
        - tuoi_mu: nominal age
        - chi: earthly branch of the birth year

    Example:
        get_van_han(1990, "nam", current_year=2025)
    """
    year = _resolve_current_year(current_year)
    tuoi_mu = get_tuoi(birth_year, year)

    return VanHan(
        sao=get_sao_chieu_menh(birth_year, gender, year),
        han=HAN_8_NAM[_cycle_index(tuoi_mu, 8)],
        diem_vuong=tuoi_mu % 8 == 0,
        tam_tai=is_tam_tai(birth_year, year),
        tuoi_mu=tuoi_mu,
        chi=get_chi(birth_year),
    )
