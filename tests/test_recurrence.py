import pytest
from datetime import date, datetime
from campus_booking.errors import InvalidRecurrence, RecurrenceFieldMissing
from campus_booking.services.recurrence import Recurrence, expand


def test_daily_expansion_is_inclusive():
    recurrence = Recurrence(is_recurring=True, frequency='daily', end_date=date(2024, 1, 3))
    occurrences = expand(recurrence, datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 10))

    assert [(o.start, o.end) for o in occurrences] == [
        (datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 10)),
        (datetime(2024, 1, 2, 9), datetime(2024, 1, 2, 10)),
        (datetime(2024, 1, 3, 9), datetime(2024, 1, 3, 10)),
    ]


def test_weekly_expansion():
    recurrence = Recurrence(is_recurring=True, frequency='weekly', end_date=date(2024, 1, 29))
    occurrences = expand(recurrence, datetime(2024, 1, 1, 14), datetime(2024, 1, 1, 15))

    assert [o.start.day for o in occurrences] == [1, 8, 15, 22, 29]


def test_monthly_clamps_to_last_day_and_returns_to_anchor():
    recurrence = Recurrence(is_recurring=True, frequency='monthly', end_date=date(2024, 4, 30))
    occurrences = expand(recurrence, datetime(2024, 1, 31, 9), datetime(2024, 1, 31, 10))

    assert [o.start.date() for o in occurrences] == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]
    assert all(o.end - o.start == occurrences[0].end - occurrences[0].start for o in occurrences)


def test_monthly_crosses_year_boundary():
    recurrence = Recurrence(is_recurring=True, frequency='monthly', end_date=date(2025, 2, 15))
    occurrences = expand(recurrence, datetime(2024, 11, 15, 9), datetime(2024, 11, 15, 10))

    assert [o.start.date() for o in occurrences] == [
        date(2024, 11, 15), date(2024, 12, 15), date(2025, 1, 15), date(2025, 2, 15)
    ]


def test_non_recurring_yields_base_interval():
    occurrences = expand(Recurrence(), datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 10))
    assert len(occurrences) == 1


def test_end_date_before_start_is_rejected():
    recurrence = Recurrence(is_recurring=True, frequency='daily', end_date=date(2023, 12, 31))
    with pytest.raises(InvalidRecurrence):
        expand(recurrence, datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 10))


def test_occurrence_limit():
    recurrence = Recurrence(is_recurring=True, frequency='daily', end_date=date(2024, 12, 31))
    with pytest.raises(InvalidRecurrence, match="more than 10"):
        expand(recurrence, datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 10), max_occurrences=10)


def test_span_longer_than_step_is_rejected():
    recurrence = Recurrence(is_recurring=True, frequency='daily', end_date=date(2024, 1, 5))
    with pytest.raises(InvalidRecurrence, match="would overlap"):
        expand(recurrence, datetime(2024, 1, 1, 9), datetime(2024, 1, 2, 10))


def test_from_dict_requires_conditional_fields():
    with pytest.raises(RecurrenceFieldMissing) as exc:
        Recurrence.from_dict({'is_recurring': True, 'end_date': '2024-01-05'})
    assert exc.value.details['field'] == 'frequency'

    with pytest.raises(RecurrenceFieldMissing) as exc:
        Recurrence.from_dict({'is_recurring': True, 'frequency': 'daily'})
    assert exc.value.details['field'] == 'end_date'


def test_from_dict_rejects_fields_without_recurrence():
    with pytest.raises(InvalidRecurrence):
        Recurrence.from_dict({'is_recurring': False, 'frequency': 'daily'})


def test_from_dict_rejects_unknown_frequency():
    with pytest.raises(InvalidRecurrence, match="yearly"):
        Recurrence.from_dict({'is_recurring': True, 'frequency': 'yearly', 'end_date': '2024-02-01'})


def test_from_dict_parses_end_date():
    recurrence = Recurrence.from_dict({'is_recurring': True, 'frequency': 'weekly', 'end_date': '2024-02-01'})
    assert recurrence.end_date == date(2024, 2, 1)
    assert Recurrence.from_dict(None) == Recurrence()
