"""
Tests for slackfiles.archive.enumerator
"""
import pytest

from slackfiles.archive.enumerator import FileEnumerator
from slackfiles.archive.errors import ListingError

from conftest import FakeSlackClient, make_file


def test_accumulates_every_page_in_order():
    """Five files at two per page take three calls and keep their order."""
    client = FakeSlackClient(files=[make_file(f"F{i}") for i in range(5)])
    enumerator = FileEnumerator(client, page_size=2)

    records = enumerator.list_files_older_than(1600000000.0)

    assert [r.id for r in records] == ["F0", "F1", "F2", "F3", "F4"]
    assert [args["page"] for _, args in client.calls] == [1, 2, 3]
    assert all(args["ts_to"] == 1600000000.0 for _, args in client.calls)


def test_total_is_reported_once():
    reported = []
    client = FakeSlackClient(files=[make_file(f"F{i}") for i in range(5)])
    enumerator = FileEnumerator(client, page_size=2, on_total=reported.append)

    enumerator.list_files_older_than(None)

    assert reported == [5]
    assert enumerator.total == 5


def test_type_filter_is_passed_through():
    client = FakeSlackClient(files=[make_file("F1")])
    FileEnumerator(client, types="images,pdfs").list_files_older_than(None)
    assert client.calls[0][1]["types"] == "images,pdfs"
    assert client.calls[0][1]["ts_to"] is None


def test_empty_index_stops_after_first_page():
    client = FakeSlackClient()
    assert FileEnumerator(client).list_files_older_than(None) == []
    assert len(client.calls) == 1


def test_failed_page_is_fatal():
    """A page without `ok` aborts the whole listing, even mid-way."""
    client = FakeSlackClient(files=[make_file(f"F{i}") for i in range(5)], failing_pages={2})
    with pytest.raises(ListingError):
        FileEnumerator(client, page_size=2).list_files_older_than(None)
    assert len(client.calls) == 2


def test_records_are_typed():
    client = FakeSlackClient(files=[make_file("F1", channels=["C1"], groups=["G1"])])
    record = FileEnumerator(client).list_files_older_than(None)[0]
    assert record.channels == ("C1",)
    assert record.groups == ("G1",)
    assert record.ims == ()
    assert record.url_private_download.endswith("/download")
