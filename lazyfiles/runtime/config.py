"""Persistent JSON config helpers.

Stores listing sort preferences and the paste conflict policy.
Malformed or missing config falls back to defaults.
Cache and clipboard state are never written here.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from ..dir_model import SortMethod, SortOption
from ..file_ops import ConflictPolicy, TransferOptions
from ..file_ops.transfer import DEFAULT_BUFFER_SIZE

logger = logging.getLogger(__name__)

APP_NAME = "lazyfiles"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Write errors are logged and otherwise ignored so a read-only config
    directory never breaks the file manager.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("could not save config to %s: %s", CONFIG_PATH, exc)


def _coerce_bool(value: object, default: bool) -> bool:
    """Only explicit booleans are accepted; anything else yields ``default``."""
    return value if isinstance(value, bool) else default


def load_sort_option() -> SortOption:
    """Load listing sort preferences, falling back field by field to defaults."""
    defaults = SortOption()
    raw = load_config().get("sort")
    if not isinstance(raw, dict):
        return defaults

    method = defaults.method
    raw_method = raw.get("method")
    if isinstance(raw_method, str):
        try:
            method = SortMethod.parse(raw_method)
        except ValueError:
            method = defaults.method

    return SortOption(
        method=method,
        directories_first=_coerce_bool(raw.get("directories_first"), defaults.directories_first),
        case_sensitive=_coerce_bool(raw.get("case_sensitive"), defaults.case_sensitive),
        reverse=_coerce_bool(raw.get("reverse"), defaults.reverse),
        show_hidden=_coerce_bool(raw.get("show_hidden"), defaults.show_hidden),
    )


def save_sort_option(sort_option: SortOption) -> None:
    config = load_config()
    config["sort"] = {
        "method": sort_option.method.value,
        "directories_first": bool(sort_option.directories_first),
        "case_sensitive": bool(sort_option.case_sensitive),
        "reverse": bool(sort_option.reverse),
        "show_hidden": bool(sort_option.show_hidden),
    }
    save_config(config)


def load_conflict_policy() -> ConflictPolicy:
    """Return the persisted paste conflict policy, ``ERROR`` when unset/invalid."""
    value = load_config().get("conflict_policy")
    if not isinstance(value, str):
        return ConflictPolicy.ERROR
    try:
        return ConflictPolicy.parse(value)
    except ValueError:
        return ConflictPolicy.ERROR


def save_conflict_policy(policy: ConflictPolicy) -> None:
    config = load_config()
    config["conflict_policy"] = policy.value
    save_config(config)


def load_transfer_options() -> TransferOptions:
    """Build paste options from config.

    ``buffer_size`` must be a positive integer; booleans and other types are
    ignored.
    """
    value = load_config().get("buffer_size")
    buffer_size = DEFAULT_BUFFER_SIZE
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        buffer_size = value
    return TransferOptions(conflict_policy=load_conflict_policy(), buffer_size=buffer_size)
