import asyncio
import time

import pytest

from core.booking import SimulatedFallbackBooker, UnavailablePrimaryBooker
from core.errors import InvalidReservationRequest
from core.itinerary import generate
from core.models import Activity, EventCandidate, FallbackBookingResponse, PrimaryBookingResponse, Venue
from core.reservations import (
    NO_AVAILABILITY,
    ReservationCoordinator,
    reservation_summary,
    reserve,
)


class StubPrimary:
    def __init__(self, response=None, error=None, delay=0.0):
        self.response = response or PrimaryBookingResponse(success=False)
        self.error = error
        self.delay = delay
        self.calls = 0

    async def attempt(self, activity, desired_time):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.response


class StubFallback:
    def __init__(self, response=None, error=None, delay=0.0):
        self.response = response or FallbackBookingResponse(success=False, reason="full")
        self.error = error
        self.delay = delay
        self.calls = []

    async def attempt(self, activity_type, desired_time, location, preferences=None):
        self.calls.append((activity_type, desired_time, location))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.response


def _dinner(**overrides):
    fields = dict(
        id="2024-07-15:dinner", name="Dinner Experience", description="", start_time="19:00",
        end_time="21:00", venue=Venue(name="Downtown Restaurant"), category="food", cost=40,
        reservation_required=True,
    )
    fields.update(overrides)
    return Activity(**fields)


def _run(coro):
    return asyncio.run(coro)


def test_not_required_skips_both_bookers():
    activity = _dinner(cost=0, reservation_required=False)
    primary, fallback = StubPrimary(), StubFallback()

    first = _run(reserve(activity, primary, fallback, location="Lisbon"))
    second = _run(reserve(activity, primary, fallback, location="Lisbon"))

    assert first == second
    assert first.status == "not_required"
    assert first.provider is None and first.confirmation_id is None
    assert primary.calls == 0 and fallback.calls == []
    assert activity.reservation_status == "not_required"


def test_primary_success_confirms():
    activity = _dinner()
    primary = StubPrimary(PrimaryBookingResponse(success=True, confirmation_id="PB123"))
    fallback = StubFallback()

    outcome = _run(reserve(activity, primary, fallback, location="Lisbon"))

    assert outcome.success and outcome.status == "confirmed"
    assert outcome.provider == "primary"
    assert outcome.confirmation_id == "PB123"
    assert outcome.failure_reason is None
    assert fallback.calls == []
    assert activity.reservation_status == "confirmed"


def test_primary_rejection_falls_back():
    activity = _dinner()
    fallback = StubFallback(FallbackBookingResponse(success=True, reservation_id="AI999"))

    outcome = _run(reserve(activity, StubPrimary(), fallback, location="Lisbon"))

    assert outcome.provider == "fallback"
    assert outcome.confirmation_id == "AI999"
    assert fallback.calls == [("food", "19:00", "Lisbon")]
    assert activity.reservation_status == "confirmed"


def test_primary_error_is_not_propagated():
    primary = StubPrimary(error=ConnectionError("venue API down"))
    fallback = StubFallback(FallbackBookingResponse(success=True, reservation_id="AI1"))

    outcome = _run(reserve(_dinner(), primary, fallback, location="Lisbon"))

    assert outcome.success and outcome.provider == "fallback"


def test_primary_timeout_triggers_fallback():
    primary = StubPrimary(PrimaryBookingResponse(success=True, confirmation_id="late"), delay=1.0)
    fallback = StubFallback(FallbackBookingResponse(success=True, reservation_id="AI2"))

    outcome = _run(reserve(_dinner(), primary, fallback, location="Lisbon", timeout=0.05))

    assert outcome.provider == "fallback"
    assert outcome.confirmation_id == "AI2"


def test_primary_success_without_id_counts_as_failure():
    primary = StubPrimary(PrimaryBookingResponse(success=True, confirmation_id=None))
    fallback = StubFallback(FallbackBookingResponse(success=True, reservation_id="AI3"))

    outcome = _run(reserve(_dinner(), primary, fallback, location="Lisbon"))

    assert outcome.provider == "fallback"


def test_both_channels_fail():
    activity = _dinner()
    outcome = _run(reserve(activity, StubPrimary(), StubFallback(), location="Lisbon"))

    assert not outcome.success
    assert outcome.status == "failed"
    assert outcome.failure_reason == NO_AVAILABILITY
    assert outcome.confirmation_id is None
    assert activity.reservation_status == "failed"


@pytest.mark.parametrize("fallback", [
    StubFallback(error=RuntimeError("network")),
    StubFallback(FallbackBookingResponse(success=True, reservation_id="AI4"), delay=1.0),
])
def test_fallback_error_or_timeout_is_terminal_failure(fallback):
    outcome = _run(reserve(_dinner(), StubPrimary(), fallback, location="Lisbon", timeout=0.05))
    assert outcome.status == "failed"
    assert outcome.failure_reason == NO_AVAILABILITY


@pytest.mark.parametrize("overrides,location,missing", [
    ({"name": ""}, "Lisbon", "name"),
    ({"start_time": ""}, "Lisbon", "start_time"),
    ({"venue": Venue(name="")}, "Lisbon", "venue"),
    ({}, "", "location"),
])
def test_invalid_request_fails_fast(overrides, location, missing):
    primary, fallback = StubPrimary(), StubFallback()
    with pytest.raises(InvalidReservationRequest) as exc:
        _run(reserve(_dinner(**overrides), primary, fallback, location=location))
    assert missing in exc.value.missing
    assert primary.calls == 0 and fallback.calls == []


def test_fallback_success_rate_matches_likelihood():
    fallback = SimulatedFallbackBooker(success_rate=0.85, delay_seconds=0, seed=1234)
    primary = UnavailablePrimaryBooker()
    activity = _dinner()

    async def trials(n):
        return [await reserve(activity, primary, fallback, location="Lisbon") for _ in range(n)]

    outcomes = _run(trials(1000))
    rate = sum(o.success for o in outcomes) / len(outcomes)

    assert abs(rate - 0.85) < 0.04
    assert all(o.provider == "fallback" for o in outcomes)


def test_fallback_ids_are_unique_across_concurrent_calls():
    fallback = SimulatedFallbackBooker(success_rate=1.0, delay_seconds=0.01)
    primary = UnavailablePrimaryBooker()

    async def concurrent(n):
        activities = [_dinner(id=f"a{i}") for i in range(n)]
        return await asyncio.gather(*(reserve(a, primary, fallback, location="Lisbon") for a in activities))

    outcomes = _run(concurrent(200))
    ids = [o.confirmation_id for o in outcomes]
    assert len(set(ids)) == 200
    assert all(i.startswith("AI") for i in ids)


@pytest.fixture
def two_day_itinerary(profile, weather_day):
    forecast = [weather_day("2024-07-15", "sunny"), weather_day("2024-07-16", "rainy")]
    return generate("Lisbon", "2024-07-15", "2024-07-16", profile, {}, forecast, [])


def test_reserve_itinerary_runs_in_parallel(two_day_itinerary):
    # 3 meals a day, 2 days: 6 reservations at 0.3s each would take 1.8s serially.
    coordinator = ReservationCoordinator(
        UnavailablePrimaryBooker(),
        SimulatedFallbackBooker(success_rate=1.0, delay_seconds=0.3),
        max_concurrency=6,
    )

    started = time.monotonic()
    outcomes = _run(coordinator.reserve_itinerary(two_day_itinerary))
    elapsed = time.monotonic() - started

    assert len(outcomes) == 6
    assert elapsed < 1.2
    assert reservation_summary(two_day_itinerary) == {"confirmed": 6, "failed": 0, "pending": 0}


def test_failed_activity_does_not_abort_the_rest(two_day_itinerary):
    fallback = SimulatedFallbackBooker(success_rate=0.5, delay_seconds=0, seed=3)
    coordinator = ReservationCoordinator(UnavailablePrimaryBooker(), fallback)

    outcomes = _run(coordinator.reserve_itinerary(two_day_itinerary))

    assert len(outcomes) == 6
    summary = reservation_summary(two_day_itinerary)
    assert summary["confirmed"] + summary["failed"] == 6
    assert summary["pending"] == 0
    assert len(two_day_itinerary.days) == 2


def test_terminal_activities_are_not_retried(two_day_itinerary):
    coordinator = ReservationCoordinator(
        UnavailablePrimaryBooker(), SimulatedFallbackBooker(success_rate=0.0, delay_seconds=0),
    )

    first = _run(coordinator.reserve_itinerary(two_day_itinerary))
    second = _run(coordinator.reserve_itinerary(two_day_itinerary))

    assert len(first) == 6 and all(o.status == "failed" for o in first)
    assert second == []


def test_single_reservation_can_be_cancelled(two_day_itinerary):
    coordinator = ReservationCoordinator(
        UnavailablePrimaryBooker(), SimulatedFallbackBooker(success_rate=1.0, delay_seconds=0.05),
    )

    async def cancel_one():
        tasks = coordinator.start(two_day_itinerary)
        cancelled_id = next(iter(tasks))
        tasks[cancelled_id].cancel()
        await asyncio.gather(*tasks.values(), return_exceptions=True)
        return cancelled_id

    cancelled_id = _run(cancel_one())
    statuses = {a.id: a.reservation_status for a in two_day_itinerary.reservable_activities()}

    assert statuses.pop(cancelled_id) == "pending"
    assert set(statuses.values()) == {"confirmed"}


def test_invalid_activity_in_itinerary_is_raised(profile, weather_day):
    itinerary = generate("", "2024-07-15", "2024-07-15", profile, {}, [weather_day("2024-07-15")], [])
    coordinator = ReservationCoordinator(UnavailablePrimaryBooker(), SimulatedFallbackBooker(delay_seconds=0))

    with pytest.raises(InvalidReservationRequest):
        _run(coordinator.reserve_itinerary(itinerary))


def test_overlapping_runs_book_each_activity_once(profile, weather_day):
    itinerary = generate("Lisbon", "2024-07-15", "2024-07-15", profile, {}, [weather_day("2024-07-15")], [])
    fallback = StubFallback(FallbackBookingResponse(success=True, reservation_id="AI5"), delay=0.05)
    coordinator = ReservationCoordinator(StubPrimary(), fallback)

    async def overlapping():
        return await asyncio.gather(
            coordinator.reserve_itinerary(itinerary),
            coordinator.reserve_itinerary(itinerary),
        )

    first, second = _run(overlapping())

    assert len(fallback.calls) == 3
    assert len(first) + len(second) == 3
    assert reservation_summary(itinerary) == {"confirmed": 3, "failed": 0, "pending": 0}


def test_cancelled_activity_is_picked_up_by_next_run(two_day_itinerary):
    coordinator = ReservationCoordinator(
        UnavailablePrimaryBooker(), SimulatedFallbackBooker(success_rate=1.0, delay_seconds=0),
    )

    async def cancel_then_rerun():
        tasks = coordinator.start(two_day_itinerary)
        cancelled_id = next(iter(tasks))
        tasks[cancelled_id].cancel()
        await asyncio.gather(*tasks.values(), return_exceptions=True)
        return cancelled_id, await coordinator.reserve_itinerary(two_day_itinerary)

    cancelled_id, rerun = _run(cancel_then_rerun())

    assert [o.activity_id for o in rerun] == [cancelled_id]
    assert reservation_summary(two_day_itinerary)["confirmed"] == 6


def test_invalid_activity_books_nothing(profile, weather_day):
    nameless_venue = EventCandidate(
        id="gig", name="Harbour Gig", category="Music", date="2024-07-15", time="18:00",
        venue=Venue(name=""), cost=35,
    )
    itinerary = generate(
        "Lisbon", "2024-07-15", "2024-07-15", profile, {}, [weather_day("2024-07-15")], [nameless_venue],
    )
    primary, fallback = StubPrimary(), StubFallback()
    coordinator = ReservationCoordinator(primary, fallback)

    with pytest.raises(InvalidReservationRequest) as exc:
        _run(coordinator.reserve_itinerary(itinerary))

    assert exc.value.missing == ["venue"]
    assert primary.calls == 0 and fallback.calls == []
    assert reservation_summary(itinerary) == {"confirmed": 0, "failed": 0, "pending": 4}


def test_outcome_fields_follow_success(two_day_itinerary):
    coordinator = ReservationCoordinator(
        StubPrimary(PrimaryBookingResponse(success=False)),
        SimulatedFallbackBooker(success_rate=0.5, delay_seconds=0, seed=11),
    )
    outcomes = _run(coordinator.reserve_itinerary(two_day_itinerary))
    skipped = _run(reserve(_dinner(cost=0, reservation_required=False), StubPrimary(), StubFallback()))

    for outcome in outcomes:
        assert outcome.provider in ("primary", "fallback")
        if outcome.success:
            assert outcome.status == "confirmed"
            assert outcome.confirmation_id and outcome.failure_reason is None
        else:
            assert outcome.status == "failed"
            assert outcome.confirmation_id is None and outcome.failure_reason
    assert skipped.status == "not_required"
    assert skipped.provider is None and skipped.confirmation_id is None and skipped.failure_reason is None
