"""
Facet view config persistence (platformdirs + JSON).

Persisted items (schema v1):
- histogram sizes, panel width, queue capacity, drain interval, stats mode,
  text size

Behavior:
- If config file missing or unreadable -> defaults are used
- If schema_version mismatches -> reset to defaults
- Unknown keys in loaded JSON are ignored with warnings
- Out-of-range values are clamped, unparseable values fall back to defaults

Only view settings are stored; stream data never is.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from nicefacets.utils.logging import get_logger

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1

TEXT_SIZES = ("text-xs", "text-sm", "text-base", "text-lg")

# field -> (min, max) for numeric settings
_LIMITS: Dict[str, tuple[float, float]] = {
    "aggregate_bucket_count": (1, 200),
    "panel_bucket_count": (1, 100),
    "panel_bar_height": (1, 50),
    "queue_capacity": (1, 100_000),
    "drain_interval_s": (0.05, 10.0),
    "panel_width_px": (120, 2000),
    "visible_rows": (1, 500),
}


@dataclass
class FacetViewConfigData:
    """
    JSON-serializable config payload.

    Keep fields JSON-friendly: primitives only.
    """
    schema_version: int = SCHEMA_VERSION
    aggregate_bucket_count: int = 20
    panel_bucket_count: int = 10
    panel_bar_height: int = 10
    queue_capacity: int = 100
    drain_interval_s: float = 0.5
    panel_width_px: int = 360
    visible_rows: int = 12
    stats_mode: bool = False
    text_size: str = "text-sm"

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return asdict(self)

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "FacetViewConfigData":
        """
        Tolerant loader:
        - ignores unknown keys
        - tolerates partially missing values
        - clamps numbers into their allowed range
        """
        defaults = cls()
        known = {f.name: f for f in fields(cls)}
        values: Dict[str, Any] = {}

        for key, raw in d.items():
            if key not in known:
                logger.warning(f"Unknown key '{key}' in facet view config, ignoring")
                continue
            default = getattr(defaults, key)
            try:
                if isinstance(default, bool):
                    value: Any = bool(raw)
                elif isinstance(default, int):
                    value = int(raw)
                elif isinstance(default, float):
                    value = float(raw)
                else:
                    value = str(raw)
            except (TypeError, ValueError):
                logger.warning(f"Bad value {raw!r} for '{key}' in facet view config, using default")
                continue
            if key in _LIMITS:
                lo, hi = _LIMITS[key]
                value = type(default)(max(lo, min(hi, value)))
            values[key] = value

        if values.get("text_size", defaults.text_size) not in TEXT_SIZES:
            logger.warning(f"Unknown text_size {values['text_size']!r}, using default")
            values.pop("text_size")

        return cls(**values)


class FacetViewConfig:
    """
    Manager for loading/saving FacetViewConfigData to disk.
    """

    def __init__(self, *, path: Path, data: Optional[FacetViewConfigData] = None):
        self.path = path
        self.data = data if data is not None else FacetViewConfigData()

    @staticmethod
    def default_config_path(
        app_name: str = "nicefacets",
        filename: str = "facet_view_config.json",
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/nicefacets/facet_view_config.json
        Linux:   ~/.config/nicefacets/facet_view_config.json
        Windows: %APPDATA%\\nicefacets\\facet_view_config.json
        """
        return Path(user_config_dir(app_name, app_author)) / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        app_name: str = "nicefacets",
        filename: str = "facet_view_config.json",
        schema_version: int = SCHEMA_VERSION,
        create_if_missing: bool = False,
    ) -> "FacetViewConfig":
        """
        Load config from disk.

        If file doesn't exist or is unreadable -> defaults.
        If schema mismatch -> defaults.
        If create_if_missing=True and file is missing -> immediately write defaults.
        """
        path = config_path or cls.default_config_path(app_name=app_name, filename=filename)
        default_data = FacetViewConfigData(schema_version=schema_version)

        try:
            parsed = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.debug(f"Facet view config not found at {path}, using defaults")
            cfg = cls(path=path, data=default_data)
            if create_if_missing:
                cfg.save()
            return cfg
        except json.JSONDecodeError as e:
            logger.warning(f"Facet view config at {path} is not valid JSON: {e}, using defaults")
            return cls(path=path, data=default_data)
        except OSError as e:
            logger.warning(f"Error reading facet view config from {path}: {e}, using defaults")
            return cls(path=path, data=default_data)

        if not isinstance(parsed, dict):
            logger.warning(f"Facet view config at {path} does not contain a dict, using defaults")
            return cls(path=path, data=default_data)

        loaded = FacetViewConfigData.from_json_dict(parsed)
        if int(loaded.schema_version) != int(schema_version):
            logger.warning(
                f"Facet view config schema version mismatch: loaded={loaded.schema_version}, "
                f"expected={schema_version}, resetting to defaults"
            )
            return cls(path=path, data=default_data)
        return cls(path=path, data=loaded)

    def save(self) -> None:
        """Write config to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.data.to_json_dict(), indent=2), encoding="utf-8")
            logger.info(f"Saved facet view config to {self.path}")
        except OSError as e:
            logger.error(f"Error saving facet view config to {self.path}: {e}")
            raise

    def get_stats_mode(self) -> bool:
        return self.data.stats_mode

    def set_stats_mode(self, stats_mode: bool) -> None:
        self.data.stats_mode = bool(stats_mode)
