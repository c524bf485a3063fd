# src/services/api/routes/driver.py
from typing import List

from fastapi import APIRouter, Depends

from src.core.rides import ActiveRideResponse, EndRideRequest, Ride, RideRegistry, StartRideRequest
from src.core.routes import Route, RouteCreateDTO, RouteService
from src.core.users import AuthUser
from src.services.api.dependencies import get_ride_registry, get_route_service
from src.services.api.security import get_current_user
from src.shared.models.common import CamelModel

router = APIRouter(prefix="/driver", tags=["Driver"])


class ListRoutesResponse(CamelModel):
    routes: List[Route]


@router.post("/routes", response_model=Route, response_model_exclude_none=True)
async def create_route(
    request: RouteCreateDTO,
    caller: AuthUser = Depends(get_current_user),
    service: RouteService = Depends(get_route_service),
):
    return await service.create_route(caller, request)


@router.get("/routes", response_model=ListRoutesResponse, response_model_exclude_none=True)
async def list_routes(
    caller: AuthUser = Depends(get_current_user),
    service: RouteService = Depends(get_route_service),
):
    return ListRoutesResponse(routes=await service.list_routes(caller))


@router.post("/rides/start", response_model=Ride, response_model_exclude_none=True)
async def start_ride(
    request: StartRideRequest,
    caller: AuthUser = Depends(get_current_user),
    registry: RideRegistry = Depends(get_ride_registry),
):
    return await registry.start_ride(caller, request.route_id)


@router.post("/rides/end", response_model=Ride, response_model_exclude_none=True)
async def end_ride(
    request: EndRideRequest,
    caller: AuthUser = Depends(get_current_user),
    registry: RideRegistry = Depends(get_ride_registry),
):
    return await registry.end_ride(caller, request.ride_id)


@router.get("/rides/active", response_model=ActiveRideResponse, response_model_exclude_none=True)
async def get_active_ride(
    caller: AuthUser = Depends(get_current_user),
    registry: RideRegistry = Depends(get_ride_registry),
):
    return ActiveRideResponse(ride=await registry.get_active_ride(caller))
