"""Read, migrate and persist the lorekeeper JSON config file."""

import json
import os
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from lorekeeper.config.schema import DEFAULT_BASE_URL, Config

CONFIG_PATH_ENV = "LOREKEEPER_CONFIG"


def get_config_path() -> Path:
    """Config file location: $LOREKEEPER_CONFIG, else ~/.lorekeeper/config.json."""
    override = os.environ.get(CONFIG_PATH_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".lorekeeper" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Build the runtime config.

    A missing file yields defaults. A file that is not valid JSON or does not
    validate is reported and also yields defaults, so a broken config never
    stops the CLI from starting.
    """
    path = config_path or get_config_path()
    if not path.is_file():
        logger.debug("No config at {}, using defaults", path)
        return Config()

    try:
        data = _migrate_config(json.loads(path.read_text(encoding="utf-8")))
        return Config.model_validate(data)
    except json.JSONDecodeError as e:
        logger.warning("Config {} is not valid JSON ({}); using defaults", path, e)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        logger.warning("Config {} has invalid fields: {}; using defaults", path, fields)
    except ValueError as e:
        logger.warning("Config {} rejected: {}; using defaults", path, e)
    return Config()


def save_config(config: Config, config_path: Path | None = None) -> Path:
    """Write the config with camelCase keys, replacing the file atomically."""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(config.model_dump(by_alias=True), indent=2, ensure_ascii=False)
    tmp_path = path.with_name(f"{path.name}.tmp")
    tmp_path.write_text(payload + "\n", encoding="utf-8")
    tmp_path.replace(path)
    return path


def _migrate_config(data: dict) -> dict:
    """Migrate old config formats to current."""
    if not isinstance(data, dict):
        raise ValueError("config root must be a JSON object")

    # Move legacy root baseUrl/timeout -> catalog.*
    catalog_cfg = data.setdefault("catalog", {})
    search_cfg = data.setdefault("search", {})
    if not isinstance(catalog_cfg, dict) or not isinstance(search_cfg, dict):
        raise ValueError("catalog and search must be JSON objects")
    for key in ("baseUrl", "timeout"):
        legacy = data.pop(key, None)
        if legacy is not None and key not in catalog_cfg:
            catalog_cfg[key] = legacy

    # Move legacy search.maxResults -> search.defaultMaxResults
    legacy_max = search_cfg.pop("maxResults", None)
    if legacy_max is not None and "defaultMaxResults" not in search_cfg:
        search_cfg["defaultMaxResults"] = legacy_max

    # Fill default catalog base URL when missing/empty
    if not catalog_cfg.get("baseUrl"):
        catalog_cfg["baseUrl"] = DEFAULT_BASE_URL

    return data
