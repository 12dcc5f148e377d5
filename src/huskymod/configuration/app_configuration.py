from __future__ import annotations
from pathlib import Path
import fcntl
from typing import Any, Dict
import yaml

from huskymod.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_REASON = "No reason given."
DEFAULT_WARN_DM_TEMPLATE = "You have been warned for... \n{reason}"
# Discord refuses to purge more than a week of messages on ban
DEFAULT_MAX_DELETE_MESSAGE_DAYS = 7


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The class caches the contents of ``./config/app_config.yml`` and exposes
    dictionary-like access helpers plus typed shortcuts for the ``moderation``
    section. Uses fcntl file locks for safe concurrent access across processes.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    def _moderation_section(self) -> Dict[str, Any]:
        section = self._data.get("moderation", {})
        return section if isinstance(section, dict) else {}

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns an empty dict when the file is missing or malformed.
        """
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the cached configuration mapping (do not mutate)."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def default_reason(self) -> str:
        """Reason attached to an action when the moderator gives none."""
        value = self._moderation_section().get("default_reason")
        return str(value) if value else DEFAULT_REASON

    @property
    def warn_dm_template(self) -> str:
        """Direct-message template sent to warned members.

        Rendered with ``str.format`` and a ``reason`` keyword.
        """
        value = self._moderation_section().get("warn_dm_template")
        return str(value) if value else DEFAULT_WARN_DM_TEMPLATE

    @property
    def max_delete_message_days(self) -> int:
        """Upper bound for the message-deletion window applied on ban."""
        value = self._moderation_section().get("max_delete_message_days", DEFAULT_MAX_DELETE_MESSAGE_DAYS)
        try:
            days = int(value)
        except (TypeError, ValueError):
            logger.warning("[APP CONFIGURATION] Invalid max_delete_message_days %r; using default.", value)
            return DEFAULT_MAX_DELETE_MESSAGE_DAYS
        return max(0, min(days, DEFAULT_MAX_DELETE_MESSAGE_DAYS))

    def format_warn_message(self, reason: str) -> str:
        """Render the warn DM for ``reason``, falling back to the default template."""
        try:
            return self.warn_dm_template.format(reason=reason)
        except (KeyError, IndexError, ValueError) as exc:
            logger.warning("[APP CONFIGURATION] Bad warn_dm_template (%s); using default.", exc)
            return DEFAULT_WARN_DM_TEMPLATE.format(reason=reason)


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
