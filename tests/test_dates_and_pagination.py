"""
Tests for the date helpers (parsing, night counts, overlap policies) and
the pagination envelope.
"""
import pytest
from datetime import date, datetime

from utils.dates import (
    OVERLAP_CLOSED, OVERLAP_HALF_OPEN, calculate_nights, format_date, parse_date, ranges_overlap,
)
from utils.pagination import build_pagination, normalize_limit, normalize_page, page_offset


class TestOverlapPolicies:

    def test_back_to_back_stays_do_not_conflict_when_half_open(self):
        """Check-out day equals the next check-in day: turnover allowed"""
        assert not ranges_overlap(date(2030, 1, 1), date(2030, 1, 3), date(2030, 1, 3), date(2030, 1, 5),
                                  OVERLAP_HALF_OPEN)

    def test_back_to_back_stays_conflict_when_closed(self):
        """Legacy closed-interval policy treats same-day turnover as a conflict"""
        assert ranges_overlap(date(2030, 1, 1), date(2030, 1, 3), date(2030, 1, 3), date(2030, 1, 5),
                              OVERLAP_CLOSED)

    @pytest.mark.parametrize('policy', [OVERLAP_HALF_OPEN, OVERLAP_CLOSED])
    def test_contained_stay_conflicts(self, policy):
        """A stay inside another one always conflicts"""
        assert ranges_overlap(date(2030, 1, 1), date(2030, 1, 10), date(2030, 1, 4), date(2030, 1, 6), policy)

    @pytest.mark.parametrize('policy', [OVERLAP_HALF_OPEN, OVERLAP_CLOSED])
    def test_disjoint_stays_do_not_conflict(self, policy):
        """Stays a week apart never conflict"""
        assert not ranges_overlap(date(2030, 1, 1), date(2030, 1, 3), date(2030, 1, 10), date(2030, 1, 12), policy)

    def test_overlap_is_symmetric(self):
        """Argument order does not change the answer"""
        a = (date(2030, 1, 1), date(2030, 1, 5))
        b = (date(2030, 1, 4), date(2030, 1, 8))
        assert ranges_overlap(*a, *b) == ranges_overlap(*b, *a)

    def test_unknown_policy_rejected(self):
        """Only half_open and closed are accepted"""
        with pytest.raises(ValueError):
            ranges_overlap(date(2030, 1, 1), date(2030, 1, 2), date(2030, 1, 1), date(2030, 1, 2), 'fuzzy')


class TestDateParsing:

    def test_iso_date_string(self):
        assert parse_date('2030-01-05') == date(2030, 1, 5)

    def test_iso_timestamp_with_zulu_suffix(self):
        """Browser timestamps like 2030-01-05T10:00:00.000Z keep their calendar date"""
        assert parse_date('2030-01-05T10:00:00.000Z') == date(2030, 1, 5)

    def test_datetime_is_truncated(self):
        assert parse_date(datetime(2030, 1, 5, 23, 59)) == date(2030, 1, 5)

    @pytest.mark.parametrize('value', ['', None, 'not-a-date', '2030-13-45'])
    def test_invalid_values_raise(self, value):
        with pytest.raises(ValueError):
            parse_date(value)

    def test_format_date(self):
        """Dates serialize as YYYY-MM-DD; empty stays empty"""
        assert format_date(date(2030, 1, 5)) == '2030-01-05'
        assert format_date(datetime(2030, 1, 5, 8, 30)) == '2030-01-05'
        assert format_date(None) == ''


class TestNights:

    def test_whole_days(self):
        assert calculate_nights('2030-01-10', '2030-01-12') == 2

    def test_order_does_not_matter(self):
        """Nights use the absolute difference"""
        assert calculate_nights(date(2030, 1, 12), date(2030, 1, 10)) == 2

    def test_partial_day_rounds_up(self):
        """36 hours counts as two nights"""
        assert calculate_nights(datetime(2030, 1, 1, 12), datetime(2030, 1, 3, 0)) == 2


class TestPagination:

    @pytest.mark.parametrize('raw, expected', [
        (None, 10), ('', 10), ('abc', 10), ('0', 10),
        ('1', 5), ('-3', 5), ('7', 7), ('50', 50), ('500', 50),
    ])
    def test_admin_limit_clamped(self, raw, expected):
        """Missing or unreadable limits use the default, then clamp to [5, 50]"""
        assert normalize_limit(raw, 10, 5, 50) == expected

    @pytest.mark.parametrize('raw, expected', [(None, 1), ('0', 1), ('-2', 1), ('x', 1), ('3', 3)])
    def test_page_floors_at_one(self, raw, expected):
        assert normalize_page(raw) == expected

    def test_envelope_for_empty_result(self):
        """No items: zero pages and no next page"""
        assert build_pagination(1, 10, 0) == {
            'currentPage': 1,
            'totalPages': 0,
            'totalItems': 0,
            'itemsPerPage': 10,
            'hasNextPage': False,
            'hasPrevPage': False,
        }

    def test_envelope_middle_page(self):
        pagination = build_pagination(2, 10, 25)
        assert pagination['totalPages'] == 3
        assert pagination['hasNextPage'] is True
        assert pagination['hasPrevPage'] is True

    def test_last_page_has_no_next(self):
        assert build_pagination(3, 10, 25)['hasNextPage'] is False

    def test_offset(self):
        assert page_offset(1, 10) == 0
        assert page_offset(3, 5) == 10
