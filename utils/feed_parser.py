"""
Parsers for import files: the JSON saved-items feed and the Letterboxd CSV export.
"""
import csv
import io
import json
import datetime
import logging
from typing import List, Union
from pydantic import ValidationError
from models.media import ImportEntry, LetterboxdEntry

logger = logging.getLogger(__name__)

REQUIRED_LETTERBOXD_COLUMNS = ("Name", "Year")


def _decode(content: Union[str, bytes]) -> str:
    if isinstance(content, bytes):
        # utf-8-sig drops the BOM some exporters prepend
        return content.decode("utf-8-sig")
    return content.lstrip("\ufeff")


def parse_feed(content: Union[str, bytes]) -> List[ImportEntry]:
    """
    Parse a saved-items feed document.

    The document is a JSON object whose "result" key holds a list of
    [external_ref, saved_at_millis] pairs.

    Args:
        content: Raw JSON text or bytes.

    Returns:
        List[ImportEntry]: Entries in file order.

    Raises:
        ValueError: If the document is not valid JSON or lacks a result list,
            or if any pair is malformed.
    """
    try:
        data = json.loads(_decode(content))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid feed file: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("result"), list):
        raise ValueError("Invalid feed file format: expected result array")

    entries = []
    for index, pair in enumerate(data["result"]):
        if not isinstance(pair, (list, tuple)) or len(pair) < 2:
            raise ValueError(f"Invalid feed entry at position {index}: {pair!r}")
        try:
            entries.append(ImportEntry(external_ref=str(pair[0]), saved_at_millis=int(pair[1])))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid feed entry at position {index}: {pair!r}") from e

    logger.info(f"Parsed {len(entries)} feed entries")
    return entries


def load_feed_file(path: str) -> List[ImportEntry]:
    """Read and parse a feed file from disk."""
    with open(path, "rb") as fh:
        return parse_feed(fh.read())


def _parse_watched_date(value: str) -> datetime.datetime:
    day = datetime.date.fromisoformat(value.strip()[:10])
    return datetime.datetime(day.year, day.month, day.day, tzinfo=datetime.timezone.utc)


def parse_letterboxd_csv(content: Union[str, bytes]) -> List[LetterboxdEntry]:
    """
    Parse a Letterboxd watchlist/diary CSV export.

    Rows with a missing title, a non-numeric year or an unparseable date are
    skipped with a warning.

    Args:
        content: Raw CSV text or bytes with a Date,Name,Year,Letterboxd URI header.

    Returns:
        List[LetterboxdEntry]: Valid rows in file order.

    Raises:
        ValueError: If the header lacks the Name or Year columns.
    """
    reader = csv.DictReader(io.StringIO(_decode(content), newline=""))
    fieldnames = [name.strip() for name in (reader.fieldnames or [])]
    reader.fieldnames = fieldnames
    missing = [col for col in REQUIRED_LETTERBOXD_COLUMNS if col not in fieldnames]
    if missing:
        raise ValueError(f"Invalid Letterboxd CSV: missing column(s) {', '.join(missing)}")

    entries = []
    for line_number, row in enumerate(reader, start=2):
        title = (row.get("Name") or "").strip()
        year = (row.get("Year") or "").strip()
        if not title or not year.isdigit():
            logger.warning(f"Skipping Letterboxd row {line_number}: missing title or invalid year")
            continue
        try:
            watched = _parse_watched_date(row.get("Date") or "")
        except ValueError:
            logger.warning(f"Skipping Letterboxd row {line_number} ({title}): invalid date {row.get('Date')!r}")
            continue
        try:
            entries.append(LetterboxdEntry(
                watched_date=watched,
                title=title,
                year=int(year),
                source_uri=(row.get("Letterboxd URI") or "").strip(),
            ))
        except ValidationError as e:
            logger.warning(f"Skipping Letterboxd row {line_number}: {e}")

    logger.info(f"Parsed {len(entries)} Letterboxd entries")
    return entries


def load_letterboxd_file(path: str) -> List[LetterboxdEntry]:
    """Read and parse a Letterboxd CSV export from disk."""
    with open(path, "rb") as fh:
        return parse_letterboxd_csv(fh.read())
