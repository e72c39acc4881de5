"""
Shared fixtures: an in-memory stand-in for the Slack Web API client.
"""

import math
from pathlib import Path

import pytest


class FakeSlackClient:
    """Serves canned Slack responses and records every call made."""

    def __init__(self, files=None, users=None, channels=None, members=None, failing_pages=()):
        self.files = list(files or [])
        self.users = dict(users or {})
        self.channels = dict(channels or {})
        self.members = dict(members or {})
        self.failing_pages = set(failing_pages)
        self.calls = []
        self.downloads = []
        self.deleted = []

    def count(self, endpoint):
        return sum(1 for name, _ in self.calls if name == endpoint)

    def files_list(self, page, count, ts_to=None, types=None):
        self.calls.append(("files.list", {"page": page, "count": count, "ts_to": ts_to, "types": types}))
        if page in self.failing_pages:
            return {"ok": False, "error": "invalid_auth"}
        chunk = self.files[(page - 1) * count:page * count]
        pages = math.ceil(len(self.files) / count)
        return {
            "ok": True,
            "files": chunk,
            "paging": {"count": count, "total": len(self.files), "page": page, "pages": pages},
        }

    def users_info(self, user):
        self.calls.append(("users.info", user))
        if user not in self.users:
            return {"ok": False, "error": "user_not_found"}
        return {"ok": True, "user": self.users[user]}

    def conversations_info(self, channel):
        self.calls.append(("conversations.info", channel))
        if channel not in self.channels:
            return {"ok": False, "error": "channel_not_found"}
        return {"ok": True, "channel": self.channels[channel]}

    def conversations_members(self, channel):
        self.calls.append(("conversations.members", channel))
        if channel not in self.members:
            return {"ok": False, "error": "channel_not_found"}
        return {"ok": True, "members": self.members[channel]}

    def download(self, url, target):
        self.calls.append(("download", url))
        self.downloads.append(Path(target))
        Path(target).write_bytes(f"contents of {url}".encode("utf-8"))

    def files_delete(self, file):
        self.calls.append(("files.delete", file))
        self.deleted.append(file)
        return {"ok": True}


def make_user(user_id, name, real_name="", display_name=""):
    """A `users.info` user object."""
    return {
        "id": user_id,
        "name": name,
        "real_name": real_name,
        "profile": {
            "title": "",
            "real_name": real_name,
            "real_name_normalized": real_name,
            "display_name": display_name,
            "display_name_normalized": display_name,
        },
    }


def make_file(file_id, title="Quarterly report", channels=(), groups=(), ims=(), user="U1",
              filetype="pdf", created=1500000000, downloadable=True):
    """A `files.list` file object."""
    data = {
        "id": file_id,
        "title": title,
        "name": f"{file_id}.{filetype}",
        "filetype": filetype,
        "mimetype": "application/pdf",
        "pretty_type": "PDF",
        "created": created,
        "timestamp": created,
        "size": 1024,
        "user": user,
        "channels": list(channels),
        "groups": list(groups),
        "ims": list(ims),
    }
    if downloadable:
        data["url_private_download"] = f"https://files.slack.com/files-pri/T1-{file_id}/download"
    return data


@pytest.fixture
def workspace():
    """A small workspace with two users, a channel, a group and a DM."""
    return FakeSlackClient(
        users={
            "U1": make_user("U1", "alice", real_name="Alice Archer"),
            "U2": make_user("U2", "bob", real_name="Bob Baker"),
        },
        channels={
            "C1": {"id": "C1", "name": "general", "name_normalized": "general",
                   "purpose": {"value": "Company wide"}},
            "G1": {"id": "G1", "name": "secret-plans", "name_normalized": "secret-plans",
                   "purpose": {"value": ""}},
        },
        members={"D1": ["U1", "U2"], "D2": ["U2", "U1"], "D3": ["U1", "U1"]},
    )
