"""Turn an uploaded registry CSV into rows keyed by logical column name."""

import csv
import io
import logging
from typing import Dict, List, Optional

from umutisafe.core.exceptions import BadRequestException
from umutisafe.utils.normalization import clean_text, missing_required_columns, resolve_columns

logger = logging.getLogger(__name__)


def parse_medicine_csv(text: str) -> List[Dict[str, Optional[str]]]:
    """Parse CSV text into dicts keyed by logical column.

    Raises:
        BadRequestException: when the file has no header row or lacks a
            required column under every accepted alias.
    """
    reader = csv.DictReader(io.StringIO(text))
    headers = reader.fieldnames or []
    if not headers:
        raise BadRequestException("CSV file is empty or has no header row")

    resolved = resolve_columns(headers)
    missing = missing_required_columns(resolved)
    if missing:
        logger.warning(f"[MEDICINE] CSV rejected, missing columns {missing}; headers were {headers}")
        raise BadRequestException(f"CSV is missing required columns: {', '.join(missing)}")

    rows: List[Dict[str, Optional[str]]] = []
    for raw in reader:
        rows.append({logical: clean_text(raw.get(header)) for logical, header in resolved.items()})
    return rows
