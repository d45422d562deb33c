"""
Batch import from JSON and spreadsheets.

Two input formats produce a batch of Documents:

- JSON: a non-empty array of page records using the Document field names
- Tabular (.csv / .xlsx / .xls): one page per row, columns matched
  case-insensitively against COLUMN_ALIASES, missing values taken from the
  default page

Parsing functions raise BatchImportError. The ``*_into`` wrappers are the
boundary: on failure they leave the store untouched, notify the user and
return False, so no import error reaches the editor core.
"""

import json
import logging
import zipfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException
from xlrd.biffh import XLRDError
from xlrd.compdoc import CompDocError

from constants import COLUMN_ALIASES, TABULAR_EXTENSIONS
from models.document import DEFAULT_DOCUMENT, Document
from services.calendar_dates import LunarConverter, lunar_label, parse_date, weekday_cn
from utils.logger import notify_error

logger = logging.getLogger(__name__)

_FALSE_STRINGS = {'', '0', 'false', 'no', 'n', 'off', '否'}


class BatchImportError(Exception):
    """Imported data is not a usable batch"""


# ======================================================================
# JSON
# ======================================================================

def parse_batch_json(text: str) -> List[Document]:
    """Parse a JSON array of page records

    Raises:
        BatchImportError: Not JSON, not a non-empty array of objects, or a
            record with values of the wrong type
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise BatchImportError(f"Invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise BatchImportError("Batch JSON must be an array of pages")
    if not data:
        raise BatchImportError("Batch JSON contains no pages")

    documents = []
    for index, record in enumerate(data):
        if not isinstance(record, dict):
            raise BatchImportError(f"Page {index} is not an object")
        try:
            documents.append(Document.from_dict(record))
        except (TypeError, ValueError) as e:
            raise BatchImportError(f"Page {index}: {e}") from e
    return documents


# ======================================================================
# Tabular
# ======================================================================

def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _lookup(row: Mapping[str, Any], field: str) -> Any:
    """First non-empty value among the field's aliases (exact, then case-insensitive)"""
    lowered = {str(key).strip().lower(): key for key in row}
    for alias in COLUMN_ALIASES[field]:
        if alias in row and not _is_missing(row[alias]):
            return row[alias]
        key = lowered.get(alias.lower())
        if key is not None and not _is_missing(row[key]):
            return row[key]
    return None


def _text(value: Any, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _truthy(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def documents_from_rows(rows: Iterable[Mapping[str, Any]],
                        lunar_converter: Optional[LunarConverter] = None) -> List[Document]:
    """Map spreadsheet rows to Documents

    Args:
        rows: One mapping per row, column name -> cell value
        lunar_converter: Fills the lunar label when the row has none

    Returns:
        One Document per row, in row order
    """
    defaults = DEFAULT_DOCUMENT
    documents = []
    for index, row in enumerate(rows):
        day = parse_date(_lookup(row, 'date'))
        date_str = day.isoformat()

        lunar = _lookup(row, 'lunar')
        if lunar is not None:
            lunar_text = _text(lunar, defaults.lunar_cn)
        else:
            lunar_text = lunar_label(day, lunar_converter) or defaults.lunar_cn

        tags = _lookup(row, 'tags')
        if tags is not None:
            tags = [tag.strip() for tag in str(tags).replace('，', ',').split(',') if tag.strip()]
        else:
            tags = list(defaults.content.tags)

        documents.append(Document.from_dict({
            'page_id': f"batch-{index}-{date_str}",
            'date_gregorian': date_str,
            'month': day.month,
            'day': day.day,
            'weekday_cn': weekday_cn(day),
            'lunar_cn': lunar_text,
            'is_holiday': _truthy(_lookup(row, 'holiday')),
            'author': {
                'name_cn': _text(_lookup(row, 'author_name'), defaults.author.name_cn),
                'bio_cn': _text(_lookup(row, 'author_bio'), defaults.author.bio_cn),
                'avatar_url': _text(_lookup(row, 'avatar'), defaults.author.avatar_url),
            },
            'content': {
                'quote_cn': _text(_lookup(row, 'quote'), defaults.content.quote_cn),
                'tags': tags,
            },
            'image': {'main_url': _text(_lookup(row, 'image'), defaults.image.main_url)},
            'branding': {'left_brand': _text(_lookup(row, 'brand'), defaults.branding.left_brand)},
        }))
    return documents


def load_tabular(path) -> List[Dict[str, Any]]:
    """Read the first sheet of a CSV or Excel file into row mappings

    Raises:
        BatchImportError: Unreadable file or no data rows
    """
    path = Path(path)
    try:
        suffix = path.suffix.lower()
        if suffix == '.csv':
            frame = pd.read_csv(path, dtype=object)
        else:
            engine = 'xlrd' if suffix == '.xls' else 'openpyxl'
            frame = pd.read_excel(path, sheet_name=0, engine=engine)
    except pd.errors.EmptyDataError as e:
        raise BatchImportError("No data found in spreadsheet") from e
    except (OSError, ValueError, ImportError, KeyError, pd.errors.ParserError,
            zipfile.BadZipFile, InvalidFileException,
            XLRDError, CompDocError) as e:
        raise BatchImportError(f"Cannot read {path.name}: {e}") from e

    if frame.empty:
        raise BatchImportError("No data found in spreadsheet")
    frame.columns = [str(column).strip() for column in frame.columns]
    return frame.to_dict(orient='records')


def load_batch_file(path, lunar_converter: Optional[LunarConverter] = None) -> List[Document]:
    """Parse a JSON, CSV or Excel batch file by extension

    Raises:
        BatchImportError: Unsupported extension or invalid content
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == '.json':
        try:
            text = path.read_text(encoding='utf-8')
        except OSError as e:
            raise BatchImportError(f"Cannot read {path.name}: {e}") from e
        return parse_batch_json(text)
    if suffix in TABULAR_EXTENSIONS:
        return documents_from_rows(load_tabular(path), lunar_converter)
    raise BatchImportError(f"Unsupported batch file type: {suffix or path.name}")


# ======================================================================
# Store boundary
# ======================================================================

def _replace_or_notify(store, loader, source: str) -> bool:
    try:
        documents = loader()
    except BatchImportError as e:
        logger.warning("Import of %s failed: %s", source, e)
        notify_error("Import failed", str(e))
        return False
    store.replace_batch(documents)
    return True


def import_json_into(store, text: str) -> bool:
    """Replace the store's batch with pages parsed from JSON text"""
    return _replace_or_notify(store, lambda: parse_batch_json(text), "JSON")


def import_tabular_into(store, path, lunar_converter: Optional[LunarConverter] = None) -> bool:
    """Replace the store's batch with one page per spreadsheet row"""
    return _replace_or_notify(store, lambda: documents_from_rows(load_tabular(path), lunar_converter), str(path))


def import_file_into(store, path, lunar_converter: Optional[LunarConverter] = None) -> bool:
    return _replace_or_notify(store, lambda: load_batch_file(path, lunar_converter), str(path))
