"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_ACTIONS_DIR = "actions"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, actions_dir="src/myapp/actions")
    """

    debug: bool = False

    # Action discovery — scanned by App.register_actions() when no roots are given
    actions_dir: str | Path = DEFAULT_ACTIONS_DIR

    # Run sync handlers and action methods in an anyio worker thread
    offload_sync_handlers: bool = True

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB
