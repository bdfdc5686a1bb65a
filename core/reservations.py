# =============================================================================
# core/reservations.py  -  Two-Stage Reservation Coordinator
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Secures a booking for every activity that needs one:
#
#     pending --primary ok-----------------------------> confirmed
#     pending --primary fails--> fallback ok-----------> confirmed
#     pending --primary fails--> fallback fails--------> failed
#
#   "Primary fails" covers a rejection, an exception and a timeout alike;
#   none of them reach the caller.  A fallback failure is final for that one
#   activity and is reported, never retried.
#
# CONCURRENCY:
#   reserve_itinerary() starts one asyncio task per pending activity and
#   bounds them with a semaphore.  Each task can be cancelled on its own; a
#   cancelled activity simply stays "pending".  Outcomes come back in
#   schedule order.
#
#   Activities are validated before any task starts, and an activity that an
#   unfinished run is still booking is never picked up a second time.
#
# This module is the only writer of Activity.reservation_status.
# =============================================================================

import asyncio
import logging
from typing import Optional

from core import config
from core.booking import FallbackBooker, PrimaryBooker
from core.errors import InvalidReservationRequest
from core.models import Activity, Itinerary, PreferenceProfile, ReservationOutcome


logger = logging.getLogger(__name__)

NO_AVAILABILITY = "no availability through any channel"


async def reserve(
    activity: Activity,
    primary_booker: PrimaryBooker,
    fallback_booker: FallbackBooker,
    location: str = "",
    preferences: Optional[PreferenceProfile] = None,
    timeout: float = config.RESERVATION_TIMEOUT_SECONDS,
) -> ReservationOutcome:
    """Book one activity, trying the primary channel and then the fallback.

    Activities that don't need a reservation get a "not_required" outcome
    straight away and neither booker is called.

    Args:
        activity: The activity to book.  Its reservation_status is updated.
        primary_booker: Venue API.
        fallback_booker: Alternate booking network.
        location: Destination the activity takes place in.
        preferences: Passed through to the fallback network.
        timeout: Seconds allowed for each booker call.

    Raises:
        InvalidReservationRequest: name, start time, venue or location missing.
    """
    if not activity.reservation_required:
        return ReservationOutcome(
            activity_id=activity.id,
            activity_name=activity.name,
            success=True,
            status="not_required",
        )

    _validate(activity, location)
    activity.reservation_status = "pending"
    desired_time = activity.start_time

    # --- Stage 1: primary ---
    try:
        primary = await asyncio.wait_for(primary_booker.attempt(activity, desired_time), timeout)
    except asyncio.TimeoutError:
        logger.warning("Primary booking for %s timed out after %.1fs", activity.name, timeout)
        primary = None
    except Exception as e:
        logger.warning("Primary booking for %s failed: %s", activity.name, e)
        primary = None

    if primary is not None and primary.success and primary.confirmation_id:
        activity.reservation_status = "confirmed"
        logger.info("Reserved %s via primary (%s)", activity.name, primary.confirmation_id)
        return ReservationOutcome(
            activity_id=activity.id,
            activity_name=activity.name,
            success=True,
            status="confirmed",
            provider="primary",
            confirmation_id=primary.confirmation_id,
        )

    # --- Stage 2: fallback ---
    try:
        fallback = await asyncio.wait_for(
            fallback_booker.attempt(activity.category, desired_time, location, preferences),
            timeout,
        )
    except asyncio.TimeoutError:
        logger.warning("Fallback booking for %s timed out after %.1fs", activity.name, timeout)
        fallback = None
    except Exception as e:
        logger.warning("Fallback booking for %s failed: %s", activity.name, e)
        fallback = None

    if fallback is not None and fallback.success and fallback.reservation_id:
        activity.reservation_status = "confirmed"
        logger.info("Reserved %s via fallback (%s)", activity.name, fallback.reservation_id)
        return ReservationOutcome(
            activity_id=activity.id,
            activity_name=activity.name,
            success=True,
            status="confirmed",
            provider="fallback",
            confirmation_id=fallback.reservation_id,
        )

    activity.reservation_status = "failed"
    logger.warning("Could not reserve %s: %s", activity.name, NO_AVAILABILITY)
    return ReservationOutcome(
        activity_id=activity.id,
        activity_name=activity.name,
        success=False,
        status="failed",
        provider="fallback",
        failure_reason=NO_AVAILABILITY,
    )


def _validate(activity: Activity, location: str) -> None:
    missing = []
    if not activity.name:
        missing.append("name")
    if not activity.start_time:
        missing.append("start_time")
    if activity.venue is None or not activity.venue.name:
        missing.append("venue")
    if not location:
        missing.append("location")
    if missing:
        raise InvalidReservationRequest(missing)


class ReservationCoordinator:
    """Runs reservations for whole itineraries with bounded parallelism.

    The coordinator remembers which (itinerary id, activity id) pairs it is
    currently booking.  Overlapping runs on the same itinerary skip those, so
    share one coordinator between callers that may run concurrently.
    """

    def __init__(
        self,
        primary_booker: PrimaryBooker,
        fallback_booker: FallbackBooker,
        timeout: float = config.RESERVATION_TIMEOUT_SECONDS,
        max_concurrency: int = config.RESERVATION_CONCURRENCY,
    ):
        self.primary_booker = primary_booker
        self.fallback_booker = fallback_booker
        self.timeout = timeout
        self.max_concurrency = max(1, max_concurrency)
        self._in_flight: set[tuple[str, str]] = set()

    async def reserve(
        self,
        activity: Activity,
        location: str,
        preferences: Optional[PreferenceProfile] = None,
    ) -> ReservationOutcome:
        return await reserve(
            activity,
            self.primary_booker,
            self.fallback_booker,
            location=location,
            preferences=preferences,
            timeout=self.timeout,
        )

    def start(self, itinerary: Itinerary) -> dict[str, asyncio.Task]:
        """Schedule a task per pending reservable activity, keyed by activity id.

        Activities already being booked by an earlier, unfinished run are
        left out.  Every selected activity is validated before the first task
        is created, so a bad request books nothing.  Must be called from a
        running event loop.  Callers may cancel any task individually.

        Raises:
            InvalidReservationRequest: a selected activity (or the itinerary's
                location) is missing required details.
        """
        pending = [
            activity
            for activity in itinerary.reservable_activities()
            if activity.reservation_status == "pending"
            and (itinerary.id, activity.id) not in self._in_flight
        ]
        for activity in pending:
            _validate(activity, itinerary.location)

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _bounded(activity: Activity) -> ReservationOutcome:
            async with semaphore:
                return await self.reserve(activity, itinerary.location, itinerary.preferences)

        tasks = {}
        for activity in pending:
            key = (itinerary.id, activity.id)
            self._in_flight.add(key)
            task = asyncio.create_task(_bounded(activity), name=f"reserve:{activity.id}")
            # A done callback also fires for tasks cancelled before they ran.
            task.add_done_callback(lambda _, key=key: self._in_flight.discard(key))
            tasks[activity.id] = task
        if tasks:
            logger.info("Reserving %d activities for itinerary %s", len(tasks), itinerary.id)
        return tasks

    async def reserve_itinerary(self, itinerary: Itinerary) -> list[ReservationOutcome]:
        """Reserve every pending activity of an itinerary.

        Cancelled tasks are left out of the result.  Any other exception is
        re-raised once all tasks have finished.

        Raises:
            InvalidReservationRequest: before any booker is called.
        """
        tasks = self.start(itinerary)
        results = await asyncio.gather(*tasks.values(), return_exceptions=True)

        outcomes = []
        for result in results:
            if isinstance(result, asyncio.CancelledError):
                continue
            if isinstance(result, BaseException):
                raise result
            outcomes.append(result)
        return outcomes


def reservation_summary(itinerary: Itinerary) -> dict[str, int]:
    """Count reservable activities by status."""
    counts = {"confirmed": 0, "failed": 0, "pending": 0}
    for activity in itinerary.reservable_activities():
        counts[activity.reservation_status] = counts.get(activity.reservation_status, 0) + 1
    return counts
