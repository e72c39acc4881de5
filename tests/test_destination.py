"""
Tests for slackfiles.archive.destination
"""
import pytest

from slackfiles.archive.destination import DestinationResolver, im_dirnames
from slackfiles.archive.errors import PartnerError
from slackfiles.archive.resolver import IdentityResolver
from slackfiles.archive.schema import FileRecord

from conftest import make_file, make_user


def _resolve(workspace, root, data, include_ims=True):
    resolver = IdentityResolver(workspace)
    record = FileRecord.from_api(data)
    owner = resolver.resolve_user(record.user)
    return DestinationResolver(resolver, root, include_ims).resolve(record, owner)


def test_channel_wins_over_group_and_conversation(workspace, tmp_path):
    """Candidates are ordered DM, group, channel and the last one is used."""
    resolution = _resolve(workspace, tmp_path, make_file("F1", channels=["C1"], groups=["G1"], ims=["D1"]))
    assert resolution.destination == tmp_path / "general"
    # Every scope still ends up in the metadata
    meta = resolution.metadata()
    assert [c["name"] for c in meta["channels"]] == ["general"]
    assert [g["name"] for g in meta["groups"]] == ["secret-plans"]
    assert meta["ims"][0]["with"]["name"] == "bob"


def test_group_wins_over_conversation(workspace, tmp_path):
    resolution = _resolve(workspace, tmp_path, make_file("F1", groups=["G1"], ims=["D1"]))
    assert resolution.destination == tmp_path / "secret-plans"


def test_no_scope_means_no_destination(workspace, tmp_path):
    resolution = _resolve(workspace, tmp_path, make_file("F1"))
    assert resolution.destination is None


def test_conversations_ignored_unless_included(workspace, tmp_path):
    resolution = _resolve(workspace, tmp_path, make_file("F1", ims=["D1"]), include_ims=False)
    assert resolution.destination is None
    assert workspace.count("conversations.members") == 0


def test_conversation_directory_names_the_pair(workspace, tmp_path):
    resolution = _resolve(workspace, tmp_path, make_file("F1", ims=["D1"]))
    assert resolution.destination == tmp_path / "im Alice Archer with Bob Baker"


def test_pair_maps_to_one_directory_in_both_directions(workspace, tmp_path):
    """Alice's file in a DM with Bob and Bob's file in a DM with Alice share a directory."""
    ours = _resolve(workspace, tmp_path, make_file("F1", ims=["D1"], user="U1"))
    theirs = _resolve(workspace, tmp_path, make_file("F2", ims=["D2"], user="U2"))
    assert ours.destination == theirs.destination


def test_existing_reversed_directory_is_reused(workspace, tmp_path):
    (tmp_path / "im Bob Baker with Alice Archer").mkdir()
    resolution = _resolve(workspace, tmp_path, make_file("F1", ims=["D1"]))
    assert resolution.destination == tmp_path / "im Bob Baker with Alice Archer"


def test_canonical_directory_beats_reversed_one(workspace, tmp_path):
    (tmp_path / "im Bob Baker with Alice Archer").mkdir()
    (tmp_path / "im Alice Archer with Bob Baker").mkdir()
    resolution = _resolve(workspace, tmp_path, make_file("F1", ims=["D1"], user="U2"))
    assert resolution.destination == tmp_path / "im Alice Archer with Bob Baker"


def test_conversation_with_only_the_owner_is_fatal(workspace, tmp_path):
    with pytest.raises(PartnerError):
        _resolve(workspace, tmp_path, make_file("F1", ims=["D3"]))


def test_im_dirnames_order_by_user_id(workspace):
    resolver = IdentityResolver(workspace)
    alice, bob = resolver.resolve_user("U1"), resolver.resolve_user("U2")
    assert im_dirnames(bob, alice) == im_dirnames(alice, bob)
    assert im_dirnames(alice, bob) == ("im Alice Archer with Bob Baker", "im Bob Baker with Alice Archer")


def test_long_multibyte_names_fit_one_path_component(workspace, tmp_path):
    workspace.users["U2"] = make_user("U2", "bob", real_name="Ωμέγα " * 60)
    workspace.channels["C9"] = {"id": "C9", "name": "日本語" * 50, "name_normalized": "", "purpose": {}}

    channel = _resolve(workspace, tmp_path, make_file("F1", channels=["C9"]))
    conversation = _resolve(workspace, tmp_path, make_file("F2", ims=["D1"]))

    for resolution in (channel, conversation):
        assert len(resolution.destination.name.encode("utf-8")) <= 255
    assert conversation.destination.name.startswith("im Alice Archer with Ωμέγα")
    # Full names still go to the metadata
    assert channel.metadata()["channels"][0]["name"] == "日本語" * 50
