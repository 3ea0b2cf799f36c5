"""
Unit tests for the shared amount and text helpers.
"""

import pytest
from decimal import Decimal

from apps.core.exceptions import BadRequestError
from apps.core.money import to_amount, require_text


class TestToAmount:

    @pytest.mark.parametrize('value, expected', [
        ('12.5', Decimal('12.50')),
        (7, Decimal('7.00')),
        (Decimal('0.01'), Decimal('0.01')),
    ])
    def test_valid(self, value, expected):
        assert to_amount(value) == expected

    @pytest.mark.parametrize('value', ['abc', None, 'NaN', 'Infinity', '1.005'])
    def test_rejected(self, value):
        with pytest.raises(BadRequestError):
            to_amount(value)

    @pytest.mark.parametrize('value', [Decimal('1e30'), '-1E+40', Decimal('10000000000.00')])
    def test_huge_amount(self, value):
        with pytest.raises(BadRequestError, match='too large'):
            to_amount(value, allow_negative=True)

    def test_sign_flags(self):
        assert to_amount('0', allow_zero=True) == Decimal('0.00')
        assert to_amount('-3.10', allow_negative=True) == Decimal('-3.10')
        with pytest.raises(BadRequestError):
            to_amount('0')
        with pytest.raises(BadRequestError):
            to_amount('-3.10')


class TestRequireText:

    def test_strips(self):
        assert require_text('  hello  ', field='Name', min_length=3) == 'hello'

    def test_bounds(self):
        with pytest.raises(BadRequestError, match='at least 3'):
            require_text(' a ', field='Name', min_length=3)
        with pytest.raises(BadRequestError, match='cannot exceed 4'):
            require_text('hello', field='Name', min_length=1, max_length=4)
