from __future__ import annotations

import pytest

from core.models import RelationOption
from core.services.bulk_edit_service import (
    CLOSED,
    BulkEditStaging,
    BulkKind,
    BulkMenuOpen,
    DeleteConfirmation,
)


def test_open_same_kind_twice_closes():
    bulk = BulkEditStaging()
    assert bulk.open(BulkKind.STATUS) == BulkMenuOpen(BulkKind.STATUS)
    assert bulk.open(BulkKind.STATUS) == CLOSED


def test_switching_kind_drops_pending_value():
    bulk = BulkEditStaging()
    bulk.open(BulkKind.STATUS)
    bulk.pick("Done")
    assert bulk.open(BulkKind.CHANNEL_3D) == BulkMenuOpen(BulkKind.CHANNEL_3D)


def test_pick_replaces_previous_value():
    bulk = BulkEditStaging()
    bulk.open(BulkKind.STATUS)
    bulk.pick("Download")
    assert bulk.pick("Done").pending == "Done"


def test_pick_without_open_menu_raises():
    with pytest.raises(RuntimeError):
        BulkEditStaging().pick("Done")


def test_commit_without_pending_is_noop(mutations):
    bulk = BulkEditStaging()
    bulk.open(BulkKind.STATUS)
    assert not bulk.can_commit
    assert bulk.commit(["a"], mutations) is False
    assert mutations.calls == []
    assert bulk.is_open


def test_status_commit_issues_one_bulk_call(mutations):
    bulk = BulkEditStaging()
    bulk.open(BulkKind.STATUS)
    bulk.pick("Done")
    assert bulk.commit(["id1", "id2"], mutations) is True
    assert mutations.calls == [("bulk_update_status", ["id1", "id2"], "Done")]
    assert bulk.state == CLOSED


def test_channel_commit_fans_out_per_record_in_selection_order(mutations):
    bulk = BulkEditStaging()
    bulk.open(BulkKind.CHANNEL_2D)
    bulk.pick("c2x")
    bulk.commit(["b", "a"], mutations)
    assert mutations.calls == [
        ("update_record", "b", {"channel_2d_ids": ["c2x"]}),
        ("update_record", "a", {"channel_2d_ids": ["c2x"]}),
    ]


def test_commit_with_empty_selection_closes_without_calls(mutations):
    bulk = BulkEditStaging()
    bulk.open(BulkKind.STATUS)
    bulk.pick("Done")
    assert bulk.commit([], mutations) is True
    assert mutations.calls == []
    assert not bulk.is_open


def test_escape_closes_menu_once():
    bulk = BulkEditStaging()
    bulk.open(BulkKind.CHANNEL_3D)
    bulk.pick("c")
    assert bulk.escape() is True
    assert bulk.state == CLOSED
    assert bulk.escape() is False


def test_option_search_narrows_and_resets_with_menu():
    options = [RelationOption("1", "Cinema 3D"), RelationOption("2", "Retro 3D"), RelationOption("3", "Flat")]
    bulk = BulkEditStaging()
    bulk.open(BulkKind.CHANNEL_3D)
    bulk.search_options("3d")
    assert [o.id for o in bulk.visible_options(options)] == ["1", "2"]
    bulk.close()
    bulk.open(BulkKind.CHANNEL_3D)
    assert len(bulk.visible_options(options)) == 3


def test_delete_requires_selection(mutations):
    prompt = DeleteConfirmation()
    assert prompt.request(0) is False
    assert prompt.confirm(["a"], mutations) == []
    assert mutations.calls == []


def test_delete_confirm_and_cancel(mutations):
    prompt = DeleteConfirmation()
    prompt.request(2)
    prompt.cancel()
    assert mutations.calls == []
    prompt.request(2)
    assert prompt.confirm(["a", "b"], mutations) == ["a", "b"]
    assert mutations.calls == [("delete_record", "a"), ("delete_record", "b")]
    assert not prompt.is_open
