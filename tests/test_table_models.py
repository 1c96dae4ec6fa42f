from __future__ import annotations

import pytest

from core.models import RelationOption, SortConfig
from infrastructure.movie_store import MovieStore

pytest.importorskip("PySide6")

from PySide6.QtCore import Qt  # noqa: E402

from app.viewmodels.channels_vm import ChannelsVM  # noqa: E402
from app.viewmodels.movies_vm import MoviesVM  # noqa: E402
from app.views.constants import COL_SEL, ID_ROLE  # noqa: E402
from app.views.table_models import ChannelTableModel, MovieTableModel  # noqa: E402


@pytest.fixture
def vm(movies, clock):
    return MoviesVM(
        MovieStore(movies),
        page_size=3,
        default_sort=SortConfig("name"),
        channels=[RelationOption("c3a", "Cinema 3D")],
        clock=clock,
    )


@pytest.fixture
def model(qapp, vm):
    return MovieTableModel(vm)


def test_shape_follows_current_page(model):
    assert model.rowCount() == 3
    assert model.columnCount() == 7


def test_display_uses_column_kinds_and_channel_labels(model):
    assert model.data(model.index(0, 1)) == "Arrival"
    assert model.data(model.index(0, 2)) == "Done"
    assert model.data(model.index(1, 4)) == "Cinema 3D, c3b"
    assert model.data(model.index(0, 3), ID_ROLE) == "m1"


def test_checkbox_toggles_selection(model, vm):
    idx = model.index(1, COL_SEL)
    assert model.data(idx, Qt.CheckStateRole) == Qt.Unchecked
    assert model.setData(idx, Qt.Checked, Qt.CheckStateRole)
    assert vm.selection.ids == ["m2"]
    assert model.data(idx, Qt.CheckStateRole) == Qt.Checked


def test_header_shows_sort_indicator_and_sorts(model, vm):
    assert model.headerData(1, Qt.Horizontal) == "Movie Title ▲"
    assert model.sort_by_section(1) is True
    assert model.headerData(1, Qt.Horizontal) == "Movie Title ▼"
    assert model.data(model.index(0, 1)) == "ex machina"


def test_relation_header_is_not_sortable(model):
    assert model.sort_by_section(4) is False
    assert model.sort_by_section(COL_SEL) is False


def test_reload_after_page_change(model, vm):
    vm.next_page()
    model.reload()
    assert model.rowCount() == 2


def test_only_edit_columns_are_editable(model):
    assert model.flags(model.index(0, 6)) & Qt.ItemIsEditable
    assert model.flags(model.index(0, 2)) & Qt.ItemIsEditable
    assert not model.flags(model.index(0, 1)) & Qt.ItemIsEditable


def test_edit_role_exposes_raw_values(model):
    assert model.data(model.index(1, 4), Qt.EditRole) == "c3a"
    assert model.data(model.index(1, 5), Qt.EditRole) == ""
    assert model.data(model.index(0, 2), Qt.EditRole) == "Done"
    assert model.data(model.index(0, 1), Qt.EditRole) is None


def test_cell_edit_routes_to_view_model(model, vm):
    edited = []
    model.recordEdited.connect(edited.append)
    assert model.setData(model.index(0, 6), "uploaded", Qt.EditRole) is True
    assert edited == ["m1"]
    assert next(r for r in vm.source_records() if r.id == "m1").note == "uploaded"
    assert model.setData(model.index(2, 4), "Cinema 3D", Qt.EditRole) is True
    assert next(r for r in vm.source_records() if r.id == "m3").channel_3d_ids == ["c3a"]


def test_cell_edit_rejected_for_read_only_column_or_unchanged_value(model):
    assert model.setData(model.index(0, 1), "Heat", Qt.EditRole) is False
    assert model.setData(model.index(0, 2), "Done", Qt.EditRole) is False


@pytest.fixture
def channel_model(qapp, channels, clock):
    return ChannelTableModel(ChannelsVM(channels, page_size=10, clock=clock))


def test_channel_model_formats_counts_and_greys_terminated(channel_model):
    assert channel_model.columnCount() == 8
    assert channel_model.headerData(3, Qt.Horizontal) == "Subscribers ▼"
    assert channel_model.data(channel_model.index(0, 3)) == "182,000"
    assert channel_model.data(channel_model.index(3, 6)) == ""
    assert channel_model.data(channel_model.index(4, 1), Qt.ForegroundRole) is not None
    assert channel_model.data(channel_model.index(0, 1), Qt.ForegroundRole) is None


def test_channel_header_click_sorts(channel_model):
    assert channel_model.sort_by_section(1) is True
    assert channel_model.data(channel_model.index(0, 1)) == "Cinema 3D"
