"""Walks the paginated Slack file index."""
from typing import Callable, List, Optional

from slackfiles.archive.errors import ListingError
from slackfiles.archive.schema import FileRecord
from slackfiles.utils.logs import report

logger = report.settings(__file__)

PAGE_SIZE = 200


class FileEnumerator:
    """Collects every file older than a cutoff into memory, page by page."""

    def __init__(self, client, page_size: int = PAGE_SIZE, types: Optional[str] = None,
                 on_total: Optional[Callable[[int], None]] = None):
        self.client = client
        self.page_size = page_size
        self.types = types
        self.on_total = on_total
        self.total = 0

    def list_files_older_than(self, cutoff: Optional[float]) -> List[FileRecord]:
        """
        Return all files created before `cutoff` (a Unix timestamp), or every
        file when `cutoff` is None, in the order Slack pages them out.

        The total reported by the first page is stored on `self.total` and
        handed to `on_total` once. A page without `ok` raises `ListingError`.
        """
        files: List[FileRecord] = []
        page = 1

        while True:
            response = self.client.files_list(
                page=page, count=self.page_size, ts_to=cutoff, types=self.types
            )
            if not response.get("ok"):
                logger.error("files.list page %d failed: %s", page, response.get("error"))
                raise ListingError(
                    f"could not retrieve the file list from Slack ({response.get('error', 'unknown error')})"
                )

            paging = response.get("paging") or {}
            if page == 1:
                self.total = int(paging.get("total", 0))
                logger.info("Found %d files older than %s", self.total, cutoff)
                if self.on_total:
                    self.on_total(self.total)

            files.extend(FileRecord.from_api(f) for f in response.get("files", []))

            # End on the final page
            if page >= int(paging.get("pages", 0)):
                break
            page += 1

        logger.debug("Collected %d files over %d pages", len(files), page)
        return files
