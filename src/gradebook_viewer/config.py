import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, Tuple

from .aggregation import Reconciler, get_reconciler
from .categories import DEFAULT_CATEGORIES, Category, load_category_config

LOGGER = logging.getLogger(__name__)

THEMES = ("system", "light", "dark")

# Fixed preference keys shared with the persisted store.
SHOW_SCORES_KEY = "showScores"
SHOW_STATUS_KEY = "showStatus"
COLLAPSED_KEY = "collapsed"
THEME_KEY = "theme"


@dataclass
class ViewerConfig:
    source: Optional[str] = None
    categories: Tuple[Category, ...] = DEFAULT_CATEGORIES
    reconcile: str = "last"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ViewerConfig":
        env = os.environ if environ is None else environ
        categories_path = env.get("GRADEBOOK_CATEGORIES")
        categories = load_category_config(Path(categories_path)) if categories_path else DEFAULT_CATEGORIES
        config = cls(
            source=env.get("GRADEBOOK_SOURCE") or None,
            categories=categories,
            reconcile=env.get("GRADEBOOK_RECONCILE", "last"),
            log_level=env.get("LOG_LEVEL", "INFO"),
        )
        # Fail fast on an unknown strategy name.
        get_reconciler(config.reconcile)
        return config

    @property
    def reconciler(self) -> Reconciler:
        return get_reconciler(self.reconcile)


class PreferenceStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class JsonPreferenceStore:
    """String key/value preferences kept in a small JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.warning("Ignoring unreadable preferences file %s: %s", self.path, exc)
            return {}
        if not isinstance(raw, dict):
            LOGGER.warning("Ignoring preferences file %s: expected a JSON object", self.path)
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")


class MemoryPreferenceStore:
    def __init__(self, values: Optional[Mapping[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


def _read_bool(store: PreferenceStore, key: str, fallback: bool) -> bool:
    raw = store.get(key)
    if raw is None:
        return fallback
    return raw == "true"


@dataclass
class DisplayPreferences:
    show_scores: bool = False
    show_status: bool = False
    collapsed: bool = False
    theme: str = "system"

    @classmethod
    def from_store(cls, store: PreferenceStore) -> "DisplayPreferences":
        theme = store.get(THEME_KEY)
        return cls(
            show_scores=_read_bool(store, SHOW_SCORES_KEY, False),
            show_status=_read_bool(store, SHOW_STATUS_KEY, False),
            collapsed=_read_bool(store, COLLAPSED_KEY, False),
            theme=theme if theme in THEMES else "system",
        )

    def save(self, store: PreferenceStore) -> None:
        store.set(SHOW_SCORES_KEY, "true" if self.show_scores else "false")
        store.set(SHOW_STATUS_KEY, "true" if self.show_status else "false")
        store.set(COLLAPSED_KEY, "true" if self.collapsed else "false")
        store.set(THEME_KEY, self.theme if self.theme in THEMES else "system")
