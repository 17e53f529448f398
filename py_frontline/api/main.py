"""FastAPI main application."""

from dataclasses import asdict
from typing import List, Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel

from .. import __version__
from ..bootstrap import FlatWorld, Services, build_services
from ..config import settings
from ..core.grid import (
    grid_cell_bounds,
    grid_cell_id_for_block,
    region_info_for_block,
)
from ..setup_logging import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Frontline Region API",
    description="Region grid, team and region name lookups",
    version=__version__,
)

services: Optional[Services] = None


def get_services() -> Services:
    if services is None:
        raise HTTPException(status_code=503, detail="Services not initialized")
    return services


# Response models
class SpawnInfo(BaseModel):
    world: str
    x: float
    y: float
    z: float
    yaw: float
    pitch: float


class TeamSummary(BaseModel):
    """Team with its current member count."""

    id: str
    display_name: str
    color: int
    max_size: int
    members: int


class TeamDetail(TeamSummary):
    spawn: Optional[SpawnInfo] = None
    home_regions: List[str]


class RegionCell(BaseModel):
    """One lettered cell of the rendered grid."""

    id: str
    name: Optional[str]
    owner: Optional[str]
    state: Optional[str]
    min_x: int
    min_z: int
    max_x: int
    max_z: int


class RegionAtPoint(BaseModel):
    region_id: str
    corner_x: int
    corner_z: int
    default_name: str
    claimed_by: Optional[str]
    cell_id: Optional[str]
    cell_name: Optional[str]


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Open storage and seed teams on startup."""
    global services
    logger.info("Starting Frontline Region API")
    services = build_services(settings, FlatWorld(settings.world_name))
    logger.info("API startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    global services
    logger.info("Shutting down Frontline Region API")
    if services is not None:
        services.close()
        services = None


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Frontline Region API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
def health_check(svc: Services = Depends(get_services)):
    """Health check endpoint."""
    try:
        svc.database.ping()
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logger.error("Health check failed", error=str(e))
        raise HTTPException(status_code=503, detail="Service unhealthy")


def _team_summary(svc: Services, team) -> dict:
    return {
        "id": team.id,
        "display_name": team.display_name,
        "color": team.color,
        "max_size": team.max_size,
        "members": svc.teams.count_team_members(team.id),
    }


@app.get("/teams", response_model=List[TeamSummary])
def list_teams(svc: Services = Depends(get_services)):
    """List all teams."""
    return [_team_summary(svc, team) for team in svc.teams.list_teams()]


@app.get("/teams/{team_id}", response_model=TeamDetail)
def get_team(team_id: str, svc: Services = Depends(get_services)):
    """Team details including spawn and seeded home regions."""
    team = svc.teams.get_team(team_id)
    if team is None:
        raise HTTPException(status_code=404, detail="Team not found")

    spawn = svc.teams.get_team_spawn(team_id)
    claims = svc.teams.list_region_claims(team_id)

    return {
        **_team_summary(svc, team),
        "spawn": asdict(spawn) if spawn else None,
        "home_regions": [f"{key.corner_x},{key.corner_z}" for key in claims],
    }


@app.get("/regions", response_model=List[RegionCell])
def list_regions(svc: Services = Depends(get_services)):
    """Every lettered cell with its name and live owner."""
    grid_size = svc.settings.grid_size
    edge = svc.settings.region_blocks

    cells = []
    for cell_id, name in svc.region_names().items():
        bounds = grid_cell_bounds(cell_id, grid_size, edge)
        status = svc.region_status.get_region_status(cell_id)
        cells.append(
            RegionCell(
                id=cell_id,
                name=name,
                owner=status.owner_team if status else None,
                state=status.state.value if status else None,
                min_x=bounds.min_x,
                min_z=bounds.min_z,
                max_x=bounds.max_x,
                max_z=bounds.max_z,
            )
        )
    return cells


@app.get("/regions/at", response_model=RegionAtPoint)
def region_at(
    x: int = Query(..., description="Block X"),
    z: int = Query(..., description="Block Z"),
    svc: Services = Depends(get_services),
):
    """Region and lettered cell containing a block."""
    edge = svc.settings.region_blocks
    info = region_info_for_block(x, z, edge)
    cell_id = grid_cell_id_for_block(x, z, svc.settings.grid_size, edge)

    return RegionAtPoint(
        region_id=info.id,
        corner_x=info.key.corner_x,
        corner_z=info.key.corner_z,
        default_name=info.name,
        claimed_by=svc.teams.get_region_claim(info.key),
        cell_id=cell_id,
        cell_name=svc.region_names().get(cell_id) if cell_id else None,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
