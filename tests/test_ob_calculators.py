from datetime import date, datetime, timedelta

import pytest

from pregnancy_calc.utils.ob_calculators import (
    DatingSource,
    PREGNANCY_MILESTONES,
    calculate_edd_from_ga,
    calculate_edd_from_lmp,
    calculate_milestone_dates,
    calculate_pregnancy_from_edd,
    calculate_pregnancy_info,
    get_redating_threshold,
)

LMP = date(2024, 1, 1)
SCAN = date(2024, 2, 26)  # 8w0d by LMP


def clock_at(day):
    return lambda: day


TODAY = clock_at(date(2024, 3, 1))


@pytest.mark.parametrize("weeks, expected", [
    (0, 0), (4, 0),
    (5, 5), (8, 5),
    (9, 7), (13, 7),
    (14, 10), (15, 10),
    (16, 14), (21, 14),
    (22, 21), (27, 21),
    (28, 21), (42, 21),
])
def test_redating_threshold_bands(weeks, expected):
    assert get_redating_threshold(weeks) == expected


def test_lmp_only():
    info = calculate_pregnancy_info(LMP, clock=TODAY)
    assert info.lmp_edd == date(2024, 10, 7)
    assert info.best_estimate_edd == date(2024, 10, 7)
    assert info.ultrasound_edd == info.lmp_edd
    assert info.source == DatingSource.LMP
    assert info.discrepancy_days == 0
    assert info.conception_date == date(2024, 1, 15)
    assert (info.gestational_age_weeks, info.gestational_age_days) == (8, 4)
    assert info.trimester == 1
    assert info.first_trimester_end == date(2024, 4, 7)
    assert info.second_trimester_end == date(2024, 7, 14)


def test_ultrasound_redates_when_discrepancy_exceeds_threshold():
    info = calculate_pregnancy_info(LMP, SCAN, 9, 0, clock=TODAY)
    assert info.discrepancy_days == 7
    assert info.source == DatingSource.ULTRASOUND
    assert info.ultrasound_edd == date(2024, 9, 30)
    assert info.best_estimate_edd == info.ultrasound_edd
    assert info.lmp_edd == date(2024, 10, 7)
    assert info.conception_date == date(2024, 1, 8)
    assert (info.gestational_age_weeks, info.gestational_age_days) == (9, 4)


def test_ultrasound_confirms_lmp_within_threshold():
    info = calculate_pregnancy_info(LMP, SCAN, 8, 2, clock=TODAY)
    assert info.discrepancy_days == 2
    assert info.source == DatingSource.LMP_CONFIRMED
    assert info.best_estimate_edd == info.lmp_edd
    assert info.ultrasound_edd == date(2024, 10, 5)


def test_discrepancy_equal_to_threshold_does_not_redate():
    scan = LMP + timedelta(days=35)  # 5w0d
    assert calculate_pregnancy_info(LMP, scan, 5, 5, clock=TODAY).source == DatingSource.LMP_CONFIRMED
    assert calculate_pregnancy_info(LMP, scan, 5, 6, clock=TODAY).source == DatingSource.ULTRASOUND


def test_second_trimester_band_uses_wider_threshold():
    scan = LMP + timedelta(days=98)  # 14w0d
    confirmed = calculate_pregnancy_info(LMP, scan, 15, 3, clock=TODAY)
    redated = calculate_pregnancy_info(LMP, scan, 15, 4, clock=TODAY)
    assert (confirmed.discrepancy_days, confirmed.source) == (10, DatingSource.LMP_CONFIRMED)
    assert (redated.discrepancy_days, redated.source) == (11, DatingSource.ULTRASOUND)


@pytest.mark.parametrize("direction", [1, -1])
def test_redating_is_monotonic_in_discrepancy(direction):
    seen_ultrasound = False
    for offset in range(0, 15):
        measured = 56 + direction * offset
        info = calculate_pregnancy_info(LMP, SCAN, measured // 7, measured % 7, clock=TODAY)
        assert info.discrepancy_days == offset
        if info.source == DatingSource.ULTRASOUND:
            seen_ultrasound = True
        else:
            assert not seen_ultrasound
            assert info.source == DatingSource.LMP_CONFIRMED
    assert seen_ultrasound


def test_never_redates_before_five_weeks():
    scan = LMP + timedelta(days=34)  # 4w6d
    for weeks in range(4, 15):
        info = calculate_pregnancy_info(LMP, scan, weeks, 6, clock=TODAY)
        assert info.source == DatingSource.LMP_CONFIRMED
        assert info.best_estimate_edd == info.lmp_edd


@pytest.mark.parametrize("scan, weeks, days", [
    (SCAN, None, None),
    (SCAN, 9, None),
    (SCAN, None, 0),
    (None, 9, 0),
    ("not-a-date", 9, 0),
])
def test_partial_ultrasound_data_falls_back_to_lmp(scan, weeks, days):
    info = calculate_pregnancy_info(LMP, scan, weeks, days, clock=TODAY)
    assert info.source == DatingSource.LMP
    assert info.discrepancy_days == 0
    assert info.ultrasound_edd == info.lmp_edd == info.best_estimate_edd


def test_scan_before_lmp_is_computed_literally():
    lmp = date(2024, 3, 1)
    scan = date(2024, 2, 1)
    info = calculate_pregnancy_info(lmp, scan, 6, 0, clock=TODAY)
    assert info.discrepancy_days == 71
    assert info.source == DatingSource.LMP_CONFIRMED
    assert info.ultrasound_edd == scan + timedelta(days=238)


@pytest.mark.parametrize("value", [None, "", "2024-02-30", "garbage", 20240101])
def test_invalid_primary_date_returns_none(value):
    assert calculate_pregnancy_info(value, clock=TODAY) is None
    assert calculate_pregnancy_from_edd(value, clock=TODAY) is None


def test_accepts_iso_strings_and_datetimes():
    from_string = calculate_pregnancy_info("2024-01-01", "2024-02-26", 9, 0, clock=TODAY)
    from_datetime = calculate_pregnancy_info(datetime(2024, 1, 1, 15, 30), SCAN, 9, 0, clock=TODAY)
    assert from_string == from_datetime == calculate_pregnancy_info(LMP, SCAN, 9, 0, clock=TODAY)


def test_from_edd():
    edd = date(2025, 6, 15)
    info = calculate_pregnancy_from_edd(edd, clock=clock_at(date(2025, 1, 1)))
    assert info.lmp_edd == info.ultrasound_edd == info.best_estimate_edd == edd
    assert info.source == DatingSource.ULTRASOUND
    assert info.discrepancy_days == 0
    assert info.conception_date == edd - timedelta(days=266) == date(2024, 9, 22)
    # estimated LMP is 2024-09-08
    assert info.first_trimester_end == date(2024, 12, 14)
    assert (info.gestational_age_weeks, info.gestational_age_days) == (16, 3)
    assert info.trimester == 2


def test_forward_and_reverse_paths_agree():
    edd = date(2025, 6, 15)
    clock = clock_at(date(2025, 2, 20))
    reverse = calculate_pregnancy_from_edd(edd, clock=clock)
    forward = calculate_pregnancy_info(edd - timedelta(days=280), clock=clock)
    for name in ("conception_date", "gestational_age_weeks", "gestational_age_days", "trimester",
                 "first_trimester_end", "second_trimester_end", "milestone_dates", "best_estimate_edd"):
        assert getattr(reverse, name) == getattr(forward, name)


@pytest.mark.parametrize("today, trimester", [
    (date(2024, 4, 7), 1),
    (date(2024, 4, 8), 2),
    (date(2024, 7, 14), 2),
    (date(2024, 7, 15), 3),
])
def test_trimester_boundaries_are_strict(today, trimester):
    assert calculate_pregnancy_info(LMP, clock=clock_at(today)).trimester == trimester


def test_clock_time_of_day_is_ignored():
    info = calculate_pregnancy_info(LMP, clock=clock_at(datetime(2024, 4, 7, 23, 59)))
    assert info.trimester == 1
    assert (info.gestational_age_weeks, info.gestational_age_days) == (13, 6)


def test_gestational_age_clamps_for_future_lmp():
    info = calculate_pregnancy_info(LMP, clock=clock_at(date(2023, 12, 1)))
    assert (info.gestational_age_weeks, info.gestational_age_days) == (0, 0)
    assert info.trimester == 1


def test_gestational_age_decomposition_matches_day_count():
    for offset in range(0, 300, 13):
        today = LMP + timedelta(days=offset)
        info = calculate_pregnancy_info(LMP, clock=clock_at(today))
        assert info.gestational_age_weeks * 7 + info.gestational_age_days == offset
        assert 0 <= info.gestational_age_days < 7


def test_milestone_dates():
    ranges = {m.name: m.date_range for m in calculate_milestone_dates(LMP)}
    assert [m.name for m in PREGNANCY_MILESTONES] == list(ranges)
    assert ranges == {
        'Blood Screening': 'Mar 11 - Apr 7, 2024',
        'First Fetal Heart Tones by Doppler': 'Mar 18 - Mar 25, 2024',
        'NT scan window': 'Mar 20 - Apr 10, 2024',
        'Anatomy scan window': 'May 6 - May 27, 2024',
        'Typical anatomy scan': 'May 20, 2024',
        'Glucose screen': 'Jun 17 - Jul 15, 2024',
        'GBS screen': 'Sep 2 - Sep 16, 2024',
        'Tdap vaccination': 'Jul 8 - Sep 9, 2024',
    }


def test_milestone_range_across_year_end():
    blood = calculate_milestone_dates(date(2024, 10, 1))[0]
    assert blood.date_range == 'Dec 10 - Jan 6, 2025'


def test_pregnancy_info_to_dict():
    data = calculate_pregnancy_info(LMP, SCAN, 9, 0, clock=TODAY).to_dict()
    assert data['source'] == 'Ultrasound'
    assert data['bestEstimateEdd'] == '2024-09-30'
    assert data['lmpEdd'] == '2024-10-07'
    assert data['discrepancyDays'] == 7
    assert data['milestoneDates'][4] == {'name': 'Typical anatomy scan', 'dateRange': 'May 13, 2024'}


def test_supporting_calculators():
    assert calculate_edd_from_lmp(None) is None
    assert calculate_edd_from_lmp(LMP) == date(2024, 10, 7)
    assert calculate_edd_from_ga(9, 0, reference_date=SCAN) == date(2024, 9, 30)
    assert calculate_edd_from_ga(8, 0, clock=clock_at(SCAN)) == date(2024, 10, 7)


@pytest.mark.parametrize("lmp, scan, weeks, days", [
    (date(9999, 12, 31), None, None, None),
    (date(9999, 6, 1), None, None, None),
    (LMP, SCAN, 1000000, 0),
    (LMP, SCAN, 10 ** 12, 0),
])
def test_lmp_outside_calendar_range_returns_none(lmp, scan, weeks, days):
    assert calculate_pregnancy_info(lmp, scan, weeks, days, clock=TODAY) is None


@pytest.mark.parametrize("edd", [date(1, 1, 1), date(1, 3, 1)])
def test_edd_outside_calendar_range_returns_none(edd):
    assert calculate_pregnancy_from_edd(edd, clock=TODAY) is None
