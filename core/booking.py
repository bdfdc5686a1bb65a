# =============================================================================
# core/booking.py  -  Booking Channels (primary API + fallback network)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Defines the two booking collaborators the reservation coordinator talks
#   to, plus simulated implementations used by the MCP tools and the tests.
#
#   PrimaryBooker    the venue's own reservation API.  Rejections and
#                    errors both mean "no availability here".
#   FallbackBooker   the alternate booking network.  It is slow and
#                    probabilistic: SimulatedFallbackBooker waits
#                    FALLBACK_DELAY_SECONDS and succeeds with probability
#                    FALLBACK_SUCCESS_RATE (0.85 by default).
#
# Both are async: the coordinator runs many of them at once and wraps every
# call in a timeout.
#
# Each simulated booker owns its random.Random, so a seeded instance gives a
# repeatable sequence without touching the global random state.
# Reservation ids come from uuid4 and are unique per call.
# =============================================================================

import asyncio
import logging
import random
from typing import Optional, Protocol
import uuid

from core import config
from core.models import (
    Activity,
    FallbackBookingResponse,
    PreferenceProfile,
    PrimaryBookingResponse,
)


logger = logging.getLogger(__name__)


class PrimaryBooker(Protocol):
    async def attempt(self, activity: Activity, desired_time: str) -> PrimaryBookingResponse:
        ...


class FallbackBooker(Protocol):
    async def attempt(
        self,
        activity_type: str,
        desired_time: str,
        location: str,
        preferences: Optional[PreferenceProfile],
    ) -> FallbackBookingResponse:
        ...


class SimulatedPrimaryBooker:
    """Venue API stand-in that accepts roughly `availability` of all requests."""

    def __init__(self, availability: float = config.PRIMARY_AVAILABILITY, seed: Optional[int] = None):
        self.availability = availability
        self._rng = random.Random(seed)

    async def attempt(self, activity: Activity, desired_time: str) -> PrimaryBookingResponse:
        await asyncio.sleep(0)
        if self._rng.random() < self.availability:
            return PrimaryBookingResponse(success=True, confirmation_id=f"PB{uuid.uuid4().hex[:12].upper()}")
        return PrimaryBookingResponse(success=False)


class UnavailablePrimaryBooker:
    """A venue API that is always fully booked."""

    async def attempt(self, activity: Activity, desired_time: str) -> PrimaryBookingResponse:
        return PrimaryBookingResponse(success=False)


class SimulatedFallbackBooker:
    """Alternate booking network with a fixed success likelihood and delay."""

    def __init__(
        self,
        success_rate: float = config.FALLBACK_SUCCESS_RATE,
        delay_seconds: float = config.FALLBACK_DELAY_SECONDS,
        seed: Optional[int] = None,
    ):
        self.success_rate = success_rate
        self.delay_seconds = delay_seconds
        self._rng = random.Random(seed)

    async def attempt(
        self,
        activity_type: str,
        desired_time: str,
        location: str,
        preferences: Optional[PreferenceProfile] = None,
    ) -> FallbackBookingResponse:
        await asyncio.sleep(self.delay_seconds)

        if not activity_type or not desired_time or not location:
            return FallbackBookingResponse(success=False, reason="Missing required reservation details")

        logger.info("Attempting fallback reservation for %s at %s (%s)", activity_type, location, desired_time)
        if self._rng.random() <= self.success_rate:
            return FallbackBookingResponse(success=True, reservation_id=f"AI{uuid.uuid4().hex[:12].upper()}")
        return FallbackBookingResponse(
            success=False,
            reason="Unable to secure reservation through alternative channels",
        )
