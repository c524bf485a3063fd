# src/services/api/routes/user.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.core.search import RideDetails, RouteSearchProjection, SearchFilters, SearchRoutesResponse
from src.core.users import AuthUser
from src.services.api.dependencies import get_projection
from src.services.api.security import get_current_user

router = APIRouter(prefix="/user", tags=["User"])


@router.get("/routes/search", response_model=SearchRoutesResponse, response_model_exclude_none=True)
async def search_routes(
    query: Optional[str] = Query(None, max_length=200),
    start_location: Optional[str] = Query(None, alias="startLocation", max_length=200),
    end_location: Optional[str] = Query(None, alias="endLocation", max_length=200),
    _: AuthUser = Depends(get_current_user),
    projection: RouteSearchProjection = Depends(get_projection),
):
    filters = SearchFilters(query=query, start_location=start_location, end_location=end_location)
    return SearchRoutesResponse(routes=await projection.search(filters))


@router.get("/rides/{ride_id}", response_model=RideDetails, response_model_exclude_none=True)
async def get_ride_details(
    ride_id: UUID,
    _: AuthUser = Depends(get_current_user),
    projection: RouteSearchProjection = Depends(get_projection),
):
    return await projection.get_ride_details(ride_id)
