"""Court routes: per-day availability grid and single-slot checks."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from polideportivo.core.dependencies import get_availability_store, get_current_user
from polideportivo.models.user import User
from polideportivo.schemas import AvailabilityOut, RequestedSlot, SlotCheckOut, SlotCheckRequest
from polideportivo.services.availability import (
    CourtNotFound,
    InvalidAvailabilityQuery,
    check_slot_availability,
    get_availability,
    legend,
)
from polideportivo.services.store import AvailabilityStore

router = APIRouter(prefix="/courts", tags=["courts"])


@router.get("/{court_id}/availability", response_model=AvailabilityOut)
async def get_court_availability(
    court_id: int,
    query_date: str | None = Query(None, alias="date", description="Date in YYYY-MM-DD format"),
    duration: int = Query(60, description="Reservation length in minutes"),
    user: User = Depends(get_current_user),
    store: AvailabilityStore = Depends(get_availability_store),
):
    """Return every candidate slot for a court on a date, classified.

    Slots start every 30 minutes. Unavailable slots are included with a status
    and reason so the frontend can render the full day. A closed day comes
    back with closed=true and no slots.
    """
    try:
        result = await get_availability(store, court_id, query_date, duration, user.id)
    except InvalidAvailabilityQuery as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"rule": e.rule, "message": e.message})
    except CourtNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Court not found")

    return AvailabilityOut(
        court_id=result.court.id,
        court_name=result.court.name,
        date=result.date,
        duration=result.duration,
        timezone=result.timezone,
        closed=result.closed,
        summary=result.summary,
        legend=legend(),
        slots=result.slots,
    )


@router.post("/{court_id}/availability", response_model=SlotCheckOut)
async def check_court_slot(
    court_id: int,
    body: SlotCheckRequest,
    user: User = Depends(get_current_user),
    store: AvailabilityStore = Depends(get_availability_store),
):
    """Check whether one exact slot can be booked."""
    try:
        check = await check_slot_availability(
            store, court_id, body.start_time, body.duration, body.exclude_reservation_id
        )
    except InvalidAvailabilityQuery as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"rule": e.rule, "message": e.message})
    except CourtNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Court not found")

    return SlotCheckOut(
        available=check.available,
        court_id=check.court_id,
        requested_slot=RequestedSlot(start_time=check.start, end_time=check.end, duration=check.duration),
        message=check.message,
    )
