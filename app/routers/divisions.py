# =============================================================================
# app/routers/divisions.py - Administrative Division Endpoints
# =============================================================================
# Province and ward pickers for address and hometown forms.
# Public reference data, no authentication required.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path

from app.exceptions import UnknownDivisionError
from lib.vietnam_data import Province, Ward, get_vietnam_data

router = APIRouter()


@router.get("/provinces", response_model=list[Province])
async def list_provinces():
    """All provinces, sorted by name."""
    return get_vietnam_data().get_provinces()


@router.get("/provinces/{province_code}/wards", response_model=list[Ward])
async def list_wards(
    province_code: Annotated[str, Path(description="Province code, e.g. 79")],
):
    """
    Wards of one province, sorted by name.

    Raises:
        404: If the province code is unknown
    """
    data = get_vietnam_data()
    if data.get_province_by_code(province_code) is None:
        raise UnknownDivisionError("tỉnh/thành phố", province_code)
    return data.get_wards_by_province(province_code)
