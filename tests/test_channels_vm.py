from __future__ import annotations

import pytest
from conftest import NOW

from app.viewmodels.channels_vm import ChannelsVM
from core.models import SortConfig, SortDirection


@pytest.fixture
def vm(channels, clock):
    ids = iter(f"g{i}" for i in range(1, 10))
    return ChannelsVM(channels, page_size=2, clock=clock, id_factory=lambda: next(ids))


def page_ids(vm):
    return [c.id for c in vm.page_view.items]


def test_default_sort_is_most_subscribed_first(vm):
    assert vm.sort_config == SortConfig("subscriber_count", SortDirection.DESC)
    assert page_ids(vm) == ["c1", "c3"]
    assert vm.total_pages == 3


def test_search_matches_title_and_resets_page(vm):
    vm.go_to_page(2)
    vm.set_search_text("3d")
    assert vm.page == 1
    assert page_ids(vm) == ["c1", "c2"]


def test_status_filter(vm):
    vm.set_status_filter(["terminated"])
    assert page_ids(vm) == ["c5"]


def test_sort_toggle_and_unknown_key(vm):
    assert vm.sort_by("title") == SortConfig("title", SortDirection.ASC)
    assert page_ids(vm) == ["c1", "c3"]
    assert vm.sort_by("title") == SortConfig("title", SortDirection.DESC)
    assert page_ids(vm) == ["c2", "c5"]
    with pytest.raises(KeyError):
        vm.sort_by("status")


def test_toggle_all_spans_pages(vm):
    vm.toggle_all()
    assert vm.selection.ids == ["c1", "c3", "c2", "c4", "c5"]
    assert vm.is_all_selected
    vm.toggle_all()
    assert len(vm.selection) == 0


def test_escape_clears_selection(vm):
    vm.toggle_row("c2")
    assert vm.handle_escape() is True
    assert vm.handle_escape() is False


def test_remove_selected_edits_list_in_place_and_clamps_page(vm, channels):
    vm.go_to_page(3)
    assert page_ids(vm) == ["c5"]
    vm.toggle_row("c5")
    assert vm.remove_selected() == ["c5"]
    assert [c.id for c in channels] == ["c1", "c2", "c3", "c4"]
    assert len(vm.selection) == 0
    assert vm.page == 2
    assert page_ids(vm) == ["c2", "c4"]


def test_remove_without_selection_is_noop(vm, channels):
    assert vm.remove_selected() == []
    assert len(channels) == 5


def test_save_group_from_selection(vm):
    with pytest.raises(ValueError):
        vm.save_group("   ")
    vm.toggle_row("c3")
    vm.toggle_row("c1")
    group = vm.save_group("  Competitors ")
    assert group.id == "g1"
    assert group.name == "Competitors"
    assert group.channel_ids == ("c3", "c1")
    assert group.created_at == NOW


def test_resaving_group_keeps_identity(vm):
    vm.toggle_row("c1")
    first = vm.save_group("Main")
    vm.toggle_row("c2")
    again = vm.save_group("Main plus", group_id=first.id)
    assert vm.groups == [again]
    assert again.id == first.id
    assert again.created_at == first.created_at
    assert again.channel_ids == ("c1", "c2")


def test_select_group_restores_selection(vm):
    vm.toggle_row("c4")
    group = vm.save_group("Small")
    vm.toggle_row("c1")
    vm.select_group(group.id)
    assert vm.selection.ids == ["c4"]
    with pytest.raises(KeyError):
        vm.select_group("missing")
