"""Facet app: standalone NiceGUI application for the live facet view.

Reads tab-separated lines from stdin (or a file) on a background thread and
serves the FacetViewController page. Runs in native or web mode via env vars.
Uses @ui.page("/") pattern.

Run:
    producer | uv run nicefacets
    NICEFACETS_INPUT=data.tsv uv run python -m nicefacets.facet_app.facet_app

Env vars:
    NICEFACETS_INPUT: path to read instead of stdin
    NICEFACETS_FACET: initial view, 0 = all facets (default 0)
    NICEFACETS_STATS: 1/0 start in stats mode (default from config)
    NICEFACETS_GUI_NATIVE: 1/0 (default 0)
    NICEFACETS_GUI_RELOAD: 1/0 (default 0)
    HOST: bind host (default 127.0.0.1 native, 0.0.0.0 web)
    PORT: bind port (default find_open_port native, 8080 web)
"""

from __future__ import annotations

import io
import os
import sys
import multiprocessing as mp
from dataclasses import dataclass
from multiprocessing import freeze_support
from typing import Optional, TextIO

from nicegui import app, ui

from nicefacets.facet_app import header
from nicefacets.facet_engine.facet_config import FacetViewConfig
from nicefacets.facet_engine.facet_state import FacetState
from nicefacets.facet_engine.facet_view_controller import FacetViewController
from nicefacets.facet_engine.line_ingestor import LineIngestor
from nicefacets.utils.gui_defaults import setUpGuiDefaults
from nicefacets.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

configure_logging()

STORAGE_SECRET = "nicefacets-session-secret"


@dataclass
class FacetSession:
    """Process-wide session shared by every page client."""
    state: FacetState
    ingestor: LineIngestor
    config: FacetViewConfig


_session: Optional[FacetSession] = None


def _env_bool(name: str, default: bool) -> bool:
    """Parse env var as bool; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    """Parse env var as int; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _input_stream() -> TextIO:
    """Open NICEFACETS_INPUT, or fall back to stdin.

    Both decode UTF-8 with replacement so a malformed line cannot end the
    stream.

    Raises:
        OSError: If the input file cannot be opened.
    """
    path = os.getenv("NICEFACETS_INPUT")
    if not path:
        return io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8", errors="replace")
    logger.info("reading input from %s", path)
    return open(path, "r", encoding="utf-8", errors="replace")


def create_session(
    stream: TextIO,
    *,
    config: Optional[FacetViewConfig] = None,
    facet: Optional[int] = None,
    stats_mode: Optional[bool] = None,
) -> FacetSession:
    """Build the shared state and start the ingestor on ``stream``.

    Args:
        stream: Line source for the ingestor thread.
        config: Loaded view config; loaded from disk when None.
        facet: Initial view; NICEFACETS_FACET when None.
        stats_mode: Initial stats mode; NICEFACETS_STATS, then the config, when None.
    """
    config = config or FacetViewConfig.load()
    facet = _env_int("NICEFACETS_FACET", 0) if facet is None else facet
    if stats_mode is None:
        stats_mode = _env_bool("NICEFACETS_STATS", config.get_stats_mode())

    state = FacetState(facet=facet, stats_mode=stats_mode)
    ingestor = LineIngestor(stream, capacity=config.data.queue_capacity)
    ingestor.start()
    return FacetSession(state=state, ingestor=ingestor, config=config)


def _quit() -> None:
    """Persist the stats mode choice, then stop the server."""
    if _session is not None:
        _session.config.set_stats_mode(_session.state.stats_mode)
        try:
            _session.config.save()
        except OSError:
            logger.exception("could not save config on quit")
    app.shutdown()


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

@ui.page("/")
def home() -> None:
    """Home page: header + FacetViewController over the shared session."""

    if _session is None:
        ui.label("No input session; start the app with main().").classes("text-negative")
        return

    setUpGuiDefaults(_session.config.data.text_size)

    ui.page_title("Facets")

    header.build_facet_header(title="Facets", on_quit=_quit)

    with ui.column().classes("w-full h-screen flex flex-col gap-2 p-4"):
        main_container = ui.column().classes("w-full flex-1 min-h-0 overflow-auto")
        ctrl = FacetViewController(
            _session.state,
            _session.ingestor,
            config=_session.config.data,
            on_quit=_quit,
        )
        ctrl.build(container=main_container)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(*, reload: bool | None = None, native_bool: bool | None = None) -> None:
    """Start the facet application.

    Defaults (no env vars, no args):
      - native=False
      - reload=False

    Env vars (used when arg is None):
      - NICEFACETS_GUI_NATIVE: 1/0
      - NICEFACETS_GUI_RELOAD: 1/0
      - HOST: bind host
      - PORT: bind port

    Exits with status 1 when the input file cannot be opened.
    """
    global _session

    native_bool = _env_bool("NICEFACETS_GUI_NATIVE", False) if native_bool is None else native_bool
    reload = _env_bool("NICEFACETS_GUI_RELOAD", False) if reload is None else reload

    try:
        stream = _input_stream()
    except OSError:
        logger.exception("cannot open input")
        sys.exit(1)
    _session = create_session(stream)

    from nicegui import native as native_module
    if native_bool:
        port = _env_int("PORT", native_module.find_open_port())
    else:
        port = _env_int("PORT", 8080)

    default_host = "127.0.0.1" if native_bool else "0.0.0.0"
    host = os.getenv("HOST", default_host)

    logger.info(
        "Starting facet app: port=%s reload=%s native=%s facet=%s",
        port,
        reload,
        native_bool,
        _session.state.nav.facet,
    )

    run_kwargs: dict = {
        "host": host,
        "port": port,
        "reload": reload,
        "native": native_bool,
        "storage_secret": STORAGE_SECRET,
        "title": "nicefacets",
    }
    if native_bool:
        run_kwargs["window_size"] = (1200, 800)
    ui.run(**run_kwargs)


if __name__ == "__main__":
    freeze_support()
    current_process = mp.current_process()
    if current_process.name == "MainProcess":
        main()
    else:
        logger.debug("Skipping GUI startup in worker process: %s", current_process.name)
