"""Configuration loading and note store registry."""

import logging
from pathlib import Path
from typing import Any

import yaml

from enml_notes.constants import CONFIG_PATH, DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT
from enml_notes.data_models import EngineSettings, StoreConfiguration, StoreMetadata

logger = logging.getLogger(__name__)


def _load_settings(raw_settings: Any) -> EngineSettings:
    """Validate the optional ``settings`` section.

    Raises:
        ValueError: If the section is not a mapping or holds values of the wrong type.
    """
    if raw_settings is None:
        return EngineSettings()
    if not isinstance(raw_settings, dict):
        raise ValueError("The 'settings' section must be a mapping")

    continue_on_fail = raw_settings.get("continue_on_fail", False)
    if not isinstance(continue_on_fail, bool):
        raise ValueError("'settings.continue_on_fail' must be true or false")

    search_limit = raw_settings.get("search_limit", DEFAULT_SEARCH_LIMIT)
    if isinstance(search_limit, bool) or not isinstance(search_limit, int):
        raise ValueError("'settings.search_limit' must be an integer")
    if not 1 <= search_limit <= MAX_SEARCH_LIMIT:
        raise ValueError(f"'settings.search_limit' must be between 1 and {MAX_SEARCH_LIMIT}")

    return EngineSettings(continue_on_fail=continue_on_fail, search_limit=search_limit)


def load_store_configuration(config_path: Path = CONFIG_PATH) -> StoreConfiguration:
    """Load and validate the store configuration file.

    Args:
        config_path: Path to the YAML configuration file. Defaults to ``stores.yaml``
            at the project root, or ``$ENML_NOTES_CONFIG`` when set.

    Returns:
        A fully populated :class:`StoreConfiguration` containing normalized store
        metadata, the configured default store name and engine settings.

    Raises:
        FileNotFoundError: If the configuration file is missing.
        ValueError: If the file exists but does not provide the expected structure
            (missing default, empty mapping, invalid entries, etc.).
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Note store configuration file not found at {config_path}")

    raw_config = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    stores_section = raw_config.get("stores")
    if not isinstance(stores_section, dict) or not stores_section:
        raise ValueError("Note store configuration must include a non-empty 'stores' mapping")

    processed: dict[str, StoreMetadata] = {}
    for name, entry in stores_section.items():
        if not isinstance(entry, dict):
            raise ValueError(f"Store '{name}' must map to a dictionary of settings")

        raw_path = entry.get("path")
        if not isinstance(raw_path, str) or not raw_path.strip():
            raise ValueError(f"Store '{name}' is missing a valid 'path' string")

        resolved_path = Path(raw_path).expanduser()
        try:
            resolved_path = resolved_path.resolve(strict=False)
        except RuntimeError:
            # resolve can raise if the filesystem is inaccessible; keep the expanded path
            pass

        default_notebook = entry.get("default_notebook", "Inbox")
        if not isinstance(default_notebook, str) or not default_notebook.strip():
            raise ValueError(f"Store '{name}' has an invalid 'default_notebook'")

        processed[name] = StoreMetadata(
            name=name,
            path=resolved_path,
            description=(entry.get("description") or "").strip(),
            default_notebook=default_notebook.strip(),
            exists=resolved_path.is_dir(),
        )

    default_store = raw_config.get("default")
    if not isinstance(default_store, str) or default_store not in processed:
        raise ValueError("Note store configuration must specify a 'default' store present in the mapping")

    settings = _load_settings(raw_config.get("settings"))
    logger.debug("Loaded %d note store(s) from %s", len(processed), config_path)
    return StoreConfiguration(default_store=default_store, stores=processed, settings=settings)


# Module-level singleton - loaded once at import time
STORE_CONFIGURATION = load_store_configuration()
