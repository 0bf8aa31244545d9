#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Centralized date handling: parsing, night counts and the overlap predicate
used by every availability check.
"""
import math
from datetime import date, datetime, timezone

OVERLAP_HALF_OPEN = 'half_open'
OVERLAP_CLOSED = 'closed'
OVERLAP_POLICIES = (OVERLAP_HALF_OPEN, OVERLAP_CLOSED)

SECONDS_PER_DAY = 24 * 60 * 60


def utc_now():
    """Get current datetime in UTC"""
    return datetime.now(timezone.utc)


def utc_today():
    """Get current date in UTC"""
    return utc_now().date()


def parse_date(value):
    """
    Parse a date from a date, datetime or ISO 8601 string.
    Raises ValueError when the value cannot be read as a date.
    """
    if value is None or value == '':
        raise ValueError('date is required')
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    return datetime.fromisoformat(text.replace('Z', '+00:00')).date()


def calculate_nights(check_in, check_out):
    """ceil(|check_out - check_in| / 1 day)"""
    if isinstance(check_in, datetime) and isinstance(check_out, datetime):
        seconds = abs((check_out - check_in).total_seconds())
    else:
        seconds = abs((parse_date(check_out) - parse_date(check_in)).days) * SECONDS_PER_DAY
    return math.ceil(seconds / SECONDS_PER_DAY)


def ranges_overlap(start_a, end_a, start_b, end_b, policy=OVERLAP_HALF_OPEN):
    """
    Decide whether two stays conflict.

    half_open: [a, b) and [c, d) overlap iff a < d and c < b, so a check-out
               and a check-in on the same day do not conflict.
    closed:    overlap iff a <= d and c <= b, so same-day turnover conflicts.
    """
    if policy == OVERLAP_HALF_OPEN:
        return start_a < end_b and start_b < end_a
    if policy == OVERLAP_CLOSED:
        return start_a <= end_b and start_b <= end_a
    raise ValueError(f'Unknown overlap policy: {policy}')


def format_date(value):
    """YYYY-MM-DD for dates, '' for empty, unparseable strings unchanged"""
    if not value:
        return ''
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    try:
        return parse_date(value).isoformat()
    except ValueError:
        return value


def format_timestamp(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return value
