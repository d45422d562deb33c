"""Calendar date helpers for page creation and imports.

The lunar conversion is pluggable: callers pass a
``converter(year, month, day) -> str``. ``lunar_python_converter`` is the
one the editor ships with. Without a converter, or when it fails, the lunar
label is left empty.
"""

import logging
import math
import numbers
import re
from datetime import date, datetime, timedelta
from typing import Any, Callable, Optional

from lunar_python import Solar

from constants import DEFAULT_IMPORT_DATE, WEEKDAYS_CN

logger = logging.getLogger(__name__)

LunarConverter = Callable[[int, int, int], str]

_DATE_RE = re.compile(r'^\s*(\d{4})\s*[-/.年]\s*(\d{1,2})\s*[-/.月]\s*(\d{1,2})')
_SPREADSHEET_EPOCH = date(1899, 12, 30)


def default_import_date() -> date:
    return date.fromisoformat(DEFAULT_IMPORT_DATE)


def weekday_cn(day: date) -> str:
    """'星期一' .. '星期日' for a date"""
    return WEEKDAYS_CN[day.weekday()]


def parse_date(value: Any) -> date:
    """Best-effort date parsing for imported cells.

    Accepts date/datetime objects (including pandas Timestamps), ISO-like
    strings ('2026-01-05', '2026/1/5', '2026年1月5日', with or without a time
    part) and spreadsheet serial day numbers. Anything else falls back to
    the fixed default import date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool) or value is None:
        return default_import_date()
    if isinstance(value, numbers.Real):
        if math.isnan(value):
            return default_import_date()
        try:
            return _SPREADSHEET_EPOCH + timedelta(days=int(value))
        except OverflowError:
            logger.debug("Spreadsheet date out of range: %r", value)
            return default_import_date()
    if isinstance(value, str):
        match = _DATE_RE.match(value)
        if match:
            try:
                return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
            except ValueError:
                pass
    logger.debug("Unparsable date %r, using %s", value, DEFAULT_IMPORT_DATE)
    return default_import_date()


def lunar_label(day: date, converter: Optional[LunarConverter] = None) -> str:
    """Lunar text for a date via the external converter, '' when unavailable"""
    if converter is None:
        return ''
    try:
        return str(converter(day.year, day.month, day.day) or '')
    except Exception as e:
        logger.warning("Lunar conversion failed for %s: %s", day.isoformat(), e)
        return ''


def lunar_python_converter(year: int, month: int, day: int) -> str:
    """'正月初一' style label (lunar month and day) from lunar-python"""
    lunar = Solar.fromYmd(year, month, day).getLunar()
    return f"{lunar.getMonthInChinese()}月{lunar.getDayInChinese()}"
