"""
HTTP API for sun position, lighting periods and timezone lookup.

Every endpoint is a pure computation; responses are JSON snapshots of the
immutable result objects and can be cached by clients.
"""

from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, FastAPI, HTTPException
from pydantic import BaseModel, Field

from suntrack.config import (
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    LOG_LEVEL,
    SUN_PATH_INTERVAL,
    TIMEZONE_PROVIDER,
    build_timezone_resolver,
)
from suntrack.errors import SunTrackError
from suntrack.logger import logger
from suntrack.solar_position import compute_sun_position
from suntrack.sun_times import (
    calculate_sun_times,
    generate_sun_path,
    generate_visible_sun_path,
    get_day_night_status,
)

# Shared resolver; its cache lives as long as the process
resolver = build_timezone_resolver()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan context manager."""
    logger.info("SunTrack starting up")
    logger.info(
        f"Configuration: TIMEZONE_PROVIDER={TIMEZONE_PROVIDER}, "
        f"fallback zone={resolver.fallback_zone}, LOG_LEVEL={LOG_LEVEL}"
    )

    yield

    logger.info(f"Shutdown complete ({len(resolver.cache)} cached timezone lookups)")


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="SunTrack API",
    lifespan=lifespan,
    redoc_url=None,
    docs_url="/docs"
)

sun_router = APIRouter(
    prefix="/sun",
    tags=["Sun"]
)


# ------------------------------------------------------------------

class LocationRequest(BaseModel):
    latitude: float = Field(DEFAULT_LATITUDE, ge=-90, le=90, description="Latitude (-90 to 90)")
    longitude: float = Field(DEFAULT_LONGITUDE, ge=-180, le=180, description="Longitude (-180 to 180)")


class InstantRequest(LocationRequest):
    time: Optional[datetime] = Field(None, description="Instant (ISO 8601, naive = UTC); default: now")


class DayRequest(LocationRequest):
    day: Optional[date] = Field(None, description="Calendar date (UTC); default: today")
    local: bool = Field(False, description="Convert event times to the location's timezone")


class SunPathRequest(LocationRequest):
    day: Optional[date] = Field(None, description="Calendar date (UTC); default: today")
    interval: int = Field(SUN_PATH_INTERVAL, ge=1, le=1440, description="Sampling interval in minutes")
    visible_only: bool = Field(False, description="Only return points above the horizon")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _coord(req: LocationRequest) -> tuple[float, float]:
    return req.latitude, req.longitude


# ------------------------------------------------------------------
# Sun position and status
# ------------------------------------------------------------------

@sun_router.post("/position")
async def sun_position(req: InstantRequest):
    """Sun azimuth, elevation and distance at an instant."""
    instant = req.time or _now()
    try:
        position = compute_sun_position(_coord(req), instant)
        return {"time": instant.isoformat(), **position.to_dict()}
    except SunTrackError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to compute sun position", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@sun_router.post("/status")
async def sun_status(req: InstantRequest):
    """Day / twilight / night classification at an instant."""
    try:
        return get_day_night_status(_coord(req), req.time or _now()).to_dict()
    except SunTrackError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to compute day/night status", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


# ------------------------------------------------------------------
# Day profile and sun path
# ------------------------------------------------------------------

@sun_router.post("/times")
async def sun_times(req: DayRequest):
    """
    Sunrise, sunset, solar noon, golden hour, blue hour and twilight.

    Null values mean the threshold is not crossed that day (polar day or
    polar night).
    """
    try:
        profile = calculate_sun_times(_coord(req), req.day or _now().date())

        timezone_id = None
        if req.local:
            timezone_id = resolver.resolve(_coord(req))
            profile = resolver.convert_profile(profile, timezone_id)

        logger.debug(
            f"Sun times for lat={req.latitude}, lon={req.longitude}, date={profile.date}: "
            f"sunrise={profile.sunrise}, sunset={profile.sunset}"
        )
        return {**profile.to_dict(), "timezone": timezone_id}

    except SunTrackError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to calculate sun times", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@sun_router.post("/path")
async def sun_path(req: SunPathRequest):
    """Sun positions sampled across one UTC day."""
    day = req.day or _now().date()
    try:
        if req.visible_only:
            points = generate_visible_sun_path(_coord(req), day, req.interval)
        else:
            points = generate_sun_path(_coord(req), day, req.interval)

        return {
            "date": day.isoformat(),
            "interval": req.interval,
            "count": len(points),
            "points": [p.to_dict() for p in points],
        }

    except SunTrackError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to generate sun path", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


# ------------------------------------------------------------------
# Timezone
# ------------------------------------------------------------------

@app.post("/timezone")
async def timezone_info(req: InstantRequest):
    """
    Timezone for a location.

    Returns:
        {
            "zone_id": "America/New_York",
            "is_dst": true,
            "offset_minutes": -240,
            "offset_hours": -4.0,
            "display_name": "EDT"
        }
    """
    try:
        return resolver.get_info(_coord(req), req.time or _now()).to_dict()
    except SunTrackError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to resolve timezone", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/health")
async def health():
    return {"status": "ok"}


# ============================================================================
# Register Routers
# ============================================================================

app.include_router(sun_router)
