"""
Import Service Module

Business logic behind the /api/import endpoints: parse an uploaded feed or
Letterboxd export and run the bulk importer off the event loop.
"""

import logging
from typing import Union
from starlette.concurrency import run_in_threadpool
from models.media import IdSpace
from models.results import ImportSummary
from utils.bulk_importer import BulkImporter
from utils.feed_parser import parse_feed, parse_letterboxd_csv

logger = logging.getLogger(__name__)


class ImportService:
    """
    Runs bulk imports for the API.

    Attributes:
        importer (BulkImporter): Configured bulk importer.
    """

    def __init__(self, importer: BulkImporter):
        self.importer = importer

    async def import_feed(self, content: Union[str, bytes], id_space: IdSpace) -> ImportSummary:
        """
        Parse a feed document and import every entry.

        Raises:
            ValueError: If the document is malformed.
        """
        entries = parse_feed(content)
        logger.info(f"Importing {len(entries)} {id_space.value.upper()} entries from upload")
        return await run_in_threadpool(self.importer.import_batch, entries, id_space)

    async def import_letterboxd(self, content: Union[str, bytes]) -> ImportSummary:
        """
        Parse a Letterboxd CSV export and import it.

        Raises:
            ValueError: If the CSV header is missing required columns.
        """
        entries = parse_letterboxd_csv(content)
        logger.info(f"Importing {len(entries)} Letterboxd entries from upload")
        return await run_in_threadpool(self.importer.import_from_csv, entries)
