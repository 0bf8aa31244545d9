from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

NUMERIC_REGEX = re.compile(r'^-?\d+(\.\d+)?$')

MONEY = '0.01'


def parse_decimal_input(value, allow_negative=False, quantize=None, error_label='Value'):
    """
    Parser for numeric request fields (str, int, float or Decimal).
    Returns Decimal value (optionally quantized).
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f'{error_label} is required')
    if isinstance(value, bool):
        raise ValueError(f'{error_label} must be a number')

    normalized = str(value).strip().replace(',', '')
    if normalized.startswith('+'):
        normalized = normalized[1:]

    if normalized.startswith('-') and not allow_negative:
        raise ValueError(f'{error_label} cannot be negative')

    if not NUMERIC_REGEX.match(normalized):
        # floats such as 1e-05 arrive in exponent form
        try:
            decimal_value = Decimal(normalized)
        except InvalidOperation:
            raise ValueError(f'{error_label} must be a number')
        if not decimal_value.is_finite():
            raise ValueError(f'{error_label} must be a number')
    else:
        decimal_value = Decimal(normalized)

    if quantize:
        decimal_value = decimal_value.quantize(Decimal(quantize), rounding=ROUND_HALF_UP)

    return decimal_value


def to_decimal(value, quantize=MONEY):
    """
    Safe conversion to Decimal with Round Half Up.
    None or empty becomes zero.
    """
    if value is None or value == '':
        value = 0

    decimal_value = Decimal(str(value))

    if quantize:
        decimal_value = decimal_value.quantize(Decimal(quantize), rounding=ROUND_HALF_UP)

    return decimal_value


def to_float(value, default=0.0):
    """JSON-friendly float for Decimal columns; falls back to default when unreadable"""
    if value is None or value == '':
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def percentage_of(amount, ratio):
    """amount * ratio rounded to cents"""
    return to_decimal(to_decimal(amount, quantize=None) * Decimal(str(ratio)))
