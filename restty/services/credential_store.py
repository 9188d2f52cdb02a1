"""
Credential store persisting the session across restarts.

The session lives in a single JSON file under the per-user configuration
directory. Reading fails soft and writing never raises: losing the file only
means the user is asked to log in again.
"""

import json
import logging
import os
import sys
from pathlib import Path

from pydantic import ValidationError

from ..schemas.auth import Session

logger = logging.getLogger(__name__)

CREDENTIALS_FILENAME = "credentials.json"


def user_config_dir() -> Path:
    """Return the platform's per-user configuration directory."""
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else Path.home() / ".config"


class CredentialStore:
    """
    Loads, saves and clears the persisted Session.

    Args:
        app_name: Directory name under the configuration directory
        config_dir: Override for the configuration directory
    """

    def __init__(self, app_name: str = "restty", config_dir: Path | None = None):
        base = config_dir if config_dir is not None else user_config_dir()
        self.path = base / app_name / CREDENTIALS_FILENAME

    def load(self) -> Session | None:
        """Return the stored session, or None if missing or unreadable."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read credentials from %s: %s", self.path, e)
            return None

        try:
            return Session.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Ignoring malformed credentials file %s: %s", self.path, e)
            return None

    def save(self, session: Session) -> bool:
        """Persist the session. Returns False (and logs) on failure."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(session.model_dump(), indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            logger.warning("Could not save credentials to %s: %s", self.path, e)
            return False
        logger.debug("Saved credentials for %s", session.email)
        return True

    def clear(self) -> bool:
        """Remove the stored session. A missing file counts as cleared."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove credentials file %s: %s", self.path, e)
            return False
        return True
