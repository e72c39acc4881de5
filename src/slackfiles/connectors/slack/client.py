"""
Minimal Slack Web API client used by the archiver.

Only the handful of endpoints the archive pipeline needs are wrapped. Calls
are form-encoded POSTs authenticated with a bearer token; every method returns
the decoded JSON body so callers can inspect `ok` themselves. Transport and
HTTP failures raise `SlackApiError`, nothing is retried.
"""

from pathlib import Path
from typing import Dict, Any, Optional

import requests

from slackfiles.utils.logs import report

logger = report.settings(__file__)

DEFAULT_BASE_URL = "https://slack.com/api"
CHUNK_SIZE = 1024 * 64
PARTIAL_SUFFIX = ".part"


class SlackApiError(RuntimeError):
    """Raised when a Slack endpoint cannot be reached or answers with an HTTP error."""


class SlackClient:
    """Thin wrapper around the Slack Web API endpoints used for archiving."""

    def __init__(self, token: str, base_url: str = DEFAULT_BASE_URL, timeout: Optional[float] = None):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or None

    @property
    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    def api_call(self, endpoint: str, **payload: Any) -> Dict[str, Any]:
        """POST to a Web API method and return its JSON body."""
        url = f"{self.base_url}/{endpoint}"
        data = {k: v for k, v in payload.items() if v is not None}
        logger.debug("API call %s %s", endpoint, data)
        try:
            r = requests.post(url, headers=self._headers, data=data, timeout=self.timeout)
            r.raise_for_status()
            body = r.json()
        except requests.exceptions.RequestException as exc:
            logger.error("API call %s failed: %s", endpoint, exc)
            raise SlackApiError(f"{endpoint}: {exc}") from exc
        except ValueError as exc:
            logger.error("API call %s returned invalid JSON: %s", endpoint, exc)
            raise SlackApiError(f"{endpoint}: invalid JSON response") from exc

        if not body.get("ok"):
            logger.warning("API call %s not ok: %s", endpoint, body.get("error"))
        return body

    # ------------------------------------------------------------------ #
    #  Endpoints                                                         #
    # ------------------------------------------------------------------ #
    def files_list(self, page: int, count: int, ts_to: Optional[float] = None,
                   types: Optional[str] = None) -> Dict[str, Any]:
        """One page of the workspace file index."""
        return self.api_call(
            "files.list",
            count=str(count),
            page=str(page),
            ts_to=f"{ts_to:.2f}" if ts_to is not None else None,
            types=types or None,
        )

    def users_info(self, user: str) -> Dict[str, Any]:
        """Profile of a single user."""
        return self.api_call("users.info", user=user)

    def conversations_info(self, channel: str) -> Dict[str, Any]:
        """Name and purpose of a public channel or private group."""
        return self.api_call("conversations.info", channel=channel)

    def conversations_members(self, channel: str) -> Dict[str, Any]:
        """Member ids of a conversation."""
        return self.api_call("conversations.members", channel=channel)

    def files_delete(self, file: str) -> Dict[str, Any]:
        """Delete a file from the workspace."""
        return self.api_call("files.delete", file=file)

    def download(self, url: str, target: Path) -> None:
        """Stream a private file to `target`.

        The body is written to a `.part` sibling first and only renamed once
        complete, so an interrupted transfer never looks like a finished file.
        """
        target = Path(target)
        partial = target.with_name(target.name + PARTIAL_SUFFIX)
        logger.debug("Downloading %s to %s", url, target)
        try:
            with requests.get(url, headers=self._headers, stream=True, timeout=self.timeout) as r:
                r.raise_for_status()
                with partial.open("wb") as f:
                    for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except requests.exceptions.RequestException as exc:
            logger.error("Download of %s failed: %s", url, exc)
            partial.unlink(missing_ok=True)
            raise SlackApiError(f"download {url}: {exc}") from exc
        partial.replace(target)
