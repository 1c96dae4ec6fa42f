from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.channels_vm import ChannelsVM
from app.viewmodels.movies_vm import MoviesVM
from app.views.main_window import MainWindow
from core.models import ChannelRecord, RelationOption
from infrastructure.csv_repository import CsvChannelRepository, CsvMovieRepository
from infrastructure.logging import init_logging
from infrastructure.movie_store import MovieStore
from infrastructure.settings import JsonSettings


BASE_DIR = Path(__file__).parent


def _parse_channels(settings: JsonSettings) -> list[RelationOption]:
    # Expect a list like: [{"id": "UC123", "label": "Main 3D"}, ...]
    raw = settings.get("channels", [])
    result: list[RelationOption] = []
    if isinstance(raw, list):
        for item in raw:
            if isinstance(item, dict) and "id" in item:
                result.append(RelationOption(id=str(item["id"]), label=str(item.get("label", item["id"]))))
    return result


def main() -> int:
    init_logging()
    settings = JsonSettings(BASE_DIR / "settings.json")

    app = QApplication(sys.argv)

    repo = CsvMovieRepository()
    store = MovieStore()
    csv_path = BASE_DIR / str(settings.get("data.movies_csv", "samples/movies.csv"))
    if csv_path.exists():
        store = MovieStore(repo.load(str(csv_path)))
        logger.info("Loaded {} movies from {}", len(store.get_records()), csv_path)
    else:
        logger.info("No movie CSV at {}", csv_path)

    channel_repo = CsvChannelRepository()
    tracked: list[ChannelRecord] = []
    channels_path = BASE_DIR / str(settings.get("data.channels_csv", "samples/channels.csv"))
    if channels_path.exists():
        tracked = list(channel_repo.load(str(channels_path)))
        logger.info("Loaded {} channels from {}", len(tracked), channels_path)
    else:
        logger.info("No channel CSV at {}", channels_path)

    # Relation options fall back to the tracked channels when settings list none
    options = _parse_channels(settings) or [RelationOption(c.id, c.title) for c in tracked]
    vm = MoviesVM(
        store,
        page_size=settings.rows_per_page,
        default_sort=settings.default_sort,
        channels=options,
    )
    channels_vm = ChannelsVM(tracked, page_size=settings.rows_per_page, default_sort=settings.channel_sort)

    win = MainWindow(vm=vm, repo=repo, channels_vm=channels_vm)
    win.show()

    code = app.exec()
    repo.save(str(csv_path), store.get_records())
    channel_repo.save(str(channels_path), tracked)
    return code


if __name__ == "__main__":
    raise SystemExit(main())
