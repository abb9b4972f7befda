"""Unit tests: candidate slot generation (pure functions, no DB)."""

from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from polideportivo.services.schedule import DaySchedule, LocalInterval
from polideportivo.services.slots import generate_candidate_slots

MADRID = ZoneInfo("Europe/Madrid")
FRIDAY = date(2030, 6, 14)


def _day(*ranges: tuple[time, time]) -> DaySchedule:
    return DaySchedule(intervals=tuple(LocalInterval(s, e) for s, e in ranges), source="weekly")


def _local(slots):
    return [(s.start.astimezone(MADRID).strftime("%H:%M"), s.end.astimezone(MADRID).strftime("%H:%M")) for s in slots]


class TestGenerateCandidateSlots:
    def test_exact_fit(self):
        slots = generate_candidate_slots(_day((time(9), time(10))), FRIDAY, 60, MADRID)
        assert _local(slots) == [("09:00", "10:00")]

    def test_too_long_yields_nothing(self):
        assert generate_candidate_slots(_day((time(9), time(10))), FRIDAY, 90, MADRID) == []

    def test_30_minute_steps(self):
        slots = generate_candidate_slots(_day((time(8), time(10))), FRIDAY, 60, MADRID)
        assert _local(slots) == [("08:00", "09:00"), ("08:30", "09:30"), ("09:00", "10:00")]

    def test_full_day_count(self):
        # 08:00-22:00 with 60-minute slots: starts 08:00..21:00 every 30 min
        slots = generate_candidate_slots(_day((time(8), time(22))), FRIDAY, 60, MADRID)
        assert len(slots) == 27
        assert _local(slots)[-1] == ("21:00", "22:00")

    def test_multiple_ranges_do_not_bridge_gap(self):
        slots = generate_candidate_slots(_day((time(9), time(10)), (time(11), time(12))), FRIDAY, 60, MADRID)
        assert _local(slots) == [("09:00", "10:00"), ("11:00", "12:00")]

    def test_bounds_are_utc(self):
        slots = generate_candidate_slots(_day((time(10), time(11))), FRIDAY, 60, MADRID)
        assert slots[0].start == datetime(2030, 6, 14, 8, 0, tzinfo=UTC)
        assert slots[0].end == datetime(2030, 6, 14, 9, 0, tzinfo=UTC)

    def test_closed_day(self):
        assert generate_candidate_slots(DaySchedule.closed_day("weekly"), FRIDAY, 60, MADRID) == []

    def test_90_minute_duration(self):
        slots = generate_candidate_slots(_day((time(8), time(10))), FRIDAY, 90, MADRID)
        assert _local(slots) == [("08:00", "09:30"), ("08:30", "10:00")]

    def test_spring_forward_skips_missing_hour(self):
        # Madrid jumps from 02:00 to 03:00 on 31 March 2030
        day = date(2030, 3, 31)
        slots = generate_candidate_slots(_day((time(1), time(4))), day, 60, MADRID)
        assert _local(slots) == [("01:00", "03:00"), ("01:30", "03:30"), ("03:00", "04:00")]
        assert all(s.end - s.start == timedelta(minutes=60) for s in slots)
        assert len({s.start for s in slots}) == len(slots)

    def test_fall_back_keeps_elapsed_duration(self):
        # Madrid repeats 02:00-03:00 on 27 October 2030
        day = date(2030, 10, 27)
        slots = generate_candidate_slots(_day((time(1), time(4))), day, 60, MADRID)
        assert all(s.end - s.start == timedelta(minutes=60) for s in slots)
        assert slots[0].start == datetime(2030, 10, 26, 23, 0, tzinfo=UTC)
        assert slots[-1].end <= datetime(2030, 10, 27, 3, 0, tzinfo=UTC)
