from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional, List

from transfer_pricing.api.deps import get_route_repository
from transfer_pricing.core.enums import LocationType
from transfer_pricing.core.response_builders import build_route_response, build_route_response_list
from transfer_pricing.schemas.route import RouteOut

router = APIRouter(prefix="/routes", tags=["routes"])


@router.get("/search", response_model=List[RouteOut])
async def search_routes(
    origin: Optional[str] = Query(None),
    destination: Optional[str] = Query(None),
    repository=Depends(get_route_repository),
):
    routes = await repository.find_by_locations(origin, destination)
    return build_route_response_list(routes)


@router.get("/by-type", response_model=List[RouteOut])
async def routes_by_location_type(
    origin_type: Optional[LocationType] = Query(None),
    destination_type: Optional[LocationType] = Query(None),
    repository=Depends(get_route_repository),
):
    routes = await repository.find_by_location_type(origin_type, destination_type)
    return build_route_response_list(routes)


@router.get("/{route_id}", response_model=RouteOut)
async def get_route(route_id: str, repository=Depends(get_route_repository)):
    route = await repository.get(route_id)
    if not route:
        raise HTTPException(status_code=404, detail=f"Route with id {route_id} not found")
    return build_route_response(route)
