"""Address catalog endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException, status

from ...data.addresses_repository import list_all_points
from ...schemas.addresses import AddressModel

router = APIRouter(prefix="/addresses", tags=["addresses"])


@router.get("", response_model=List[AddressModel], status_code=status.HTTP_200_OK)
def list_addresses() -> List[AddressModel]:
    """List the whole catalog ordered by name."""
    try:
        return [AddressModel.from_point(point) for point in list_all_points()]
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error fetching addresses: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch addresses"
        ) from exc
