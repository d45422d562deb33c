"""
Tests for date parsing, weekday labels and the lunar converter hook.
"""
from datetime import date, datetime

import pandas as pd
import pytest

from services.calendar_dates import lunar_label, lunar_python_converter, parse_date, weekday_cn


class TestParseDate:

    @pytest.mark.parametrize("value", [
        '2026-01-05',
        '2026/1/5',
        '2026.01.05',
        '2026年1月5日',
        '2026-01-05 08:30:00',
        date(2026, 1, 5),
        datetime(2026, 1, 5, 12, 0),
        pd.Timestamp('2026-01-05'),
    ])
    def test_accepted_forms(self, value):
        assert parse_date(value) == date(2026, 1, 5)

    def test_spreadsheet_serial(self):
        assert parse_date(46023) == date(2026, 1, 1)
        assert parse_date(46027.0) == date(2026, 1, 5)

    @pytest.mark.parametrize("value", [None, '', 'soon', '2026-02-30', float('nan'), True])
    def test_fallback(self, value):
        assert parse_date(value) == date(2026, 1, 1)


class TestLabels:

    def test_weekday(self):
        assert weekday_cn(date(2026, 1, 1)) == '星期四'
        assert weekday_cn(date(2026, 1, 4)) == '星期日'
        assert weekday_cn(date(2026, 1, 5)) == '星期一'

    def test_lunar_without_converter(self):
        assert lunar_label(date(2026, 2, 17)) == ''

    def test_lunar_converter_args(self):
        calls = []

        def converter(year, month, day):
            calls.append((year, month, day))
            return '正月初一'

        assert lunar_label(date(2026, 2, 17), converter) == '正月初一'
        assert calls == [(2026, 2, 17)]

    def test_failing_converter(self):
        def converter(year, month, day):
            raise RuntimeError("offline")

        assert lunar_label(date(2026, 2, 17), converter) == ''

    def test_lunar_python_new_year(self):
        assert lunar_python_converter(2026, 2, 17) == '正月初一'
        assert lunar_label(date(2026, 2, 17), lunar_python_converter) == '正月初一'
