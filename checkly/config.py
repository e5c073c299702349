from pathlib import Path

import yaml

CHECKLY_DIR = Path.home() / ".checkly"
DB_PATH = CHECKLY_DIR / "checkly.db"
CONFIG_PATH = CHECKLY_DIR / "config.yaml"


class Config:
    """Single-instance config manager. Load once, cache in memory."""

    _instance: "Config | None" = None
    _data: dict[str, object]

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._data = {}
            cls._instance._load()
        return cls._instance

    def _load(self) -> None:
        if not CONFIG_PATH.exists():
            self._data = {}
            return
        try:
            with CONFIG_PATH.open() as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError):
            loaded = None
        self._data = loaded if isinstance(loaded, dict) else {}

    def _save(self) -> None:
        CHECKLY_DIR.mkdir(parents=True, exist_ok=True)
        with CONFIG_PATH.open("w") as f:
            yaml.dump(self._data, f, default_flow_style=False, allow_unicode=True)

    def get(self, key: str, default: object = None) -> object:
        return self._data.get(key, default)

    def set(self, key: str, value: object) -> None:
        self._data[key] = value
        self._save()


_config = Config()


def get_default_category() -> str | None:
    """Category id used for new tasks when none is given. None = first category."""
    val = _config.get("default_category")
    return str(val).strip() if val else None


def set_default_category(category_id: str) -> None:
    _config.set("default_category", category_id)
