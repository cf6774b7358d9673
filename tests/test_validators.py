"""
Test input validators.
"""

import pytest

from utils.validators import (
    validate_email, validate_phone, validate_date, validate_time,
    validate_date_range, validate_required_fields, sanitize_string
)


class TestEmailValidator:
    """Test email validation."""

    def test_valid_emails(self):
        assert validate_email('test@example.com')
        assert validate_email('user.name@domain.vn')
        assert validate_email('user+tag@example.org')

    def test_invalid_emails(self):
        assert not validate_email('')
        assert not validate_email(None)
        assert not validate_email('invalid')
        assert not validate_email('@domain.com')
        assert not validate_email('user@')


class TestPhoneValidator:
    """Test phone validation."""

    @pytest.mark.parametrize('phone', ['0901234567', '090 123 4567', '+84901234567',
                                       '(028) 3823-4567'])
    def test_valid_phones(self, phone):
        assert validate_phone(phone)

    @pytest.mark.parametrize('phone', ['', None, '12345', '901234567', '+0123456789',
                                       'phone'])
    def test_invalid_phones(self, phone):
        assert not validate_phone(phone)


class TestDateValidators:
    """Dates, times and ranges."""

    def test_dates(self):
        assert validate_date('2030-02-28')
        assert not validate_date('2030-02-30')
        assert not validate_date('28/02/2030')
        assert not validate_date(None)

    def test_dates_must_be_zero_padded(self):
        assert not validate_date('2030-3-9')
        assert not validate_date('2030-03-9')
        assert not validate_date(' 2030-03-09')
        assert validate_date('2030-03-09')

    def test_times(self):
        assert validate_time('09:00')
        assert validate_time('23:59')
        assert not validate_time('24:00')
        assert not validate_time('9am')

    def test_times_must_be_zero_padded(self):
        assert not validate_time('9:5')
        assert not validate_time('9:05')
        assert validate_time('09:05')

    def test_range_inclusive(self):
        assert validate_date_range('2030-01-01', '2030-01-01')
        assert validate_date_range('2030-01-01', '2030-01-05')
        assert not validate_date_range('2030-01-05', '2030-01-01')
        assert not validate_date_range(None, '2030-01-01')
        assert not validate_date_range('2030-3-9', '2030-03-15')
        assert not validate_date_range('2030-03-09', '2030-3-15')


class TestFieldHelpers:
    """Required fields and sanitizing."""

    def test_required_fields(self):
        errors = validate_required_fields({'a': 'x', 'b': '  ', 'c': 0}, ['a', 'b', 'c', 'd'])
        assert set(errors) == {'b', 'd'}

    def test_sanitize_string(self):
        assert sanitize_string('  hello ') == 'hello'
        assert sanitize_string('   ') is None
        assert sanitize_string(None) is None
        assert sanitize_string('abcdef', max_length=3) == 'abc'
