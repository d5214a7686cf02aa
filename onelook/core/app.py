import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from onelook.assignments.service import AssignmentBoard
from onelook.assignments.stores import AssignmentStore, get_store
from .config import Config
from .db import close_db, init_db

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


class OneLookApp:
    """Wires config, logging, storage and the assignment board together."""

    def __init__(
        self,
        config_path: Optional[str] = None,
        watch_config: bool = False,
        store: Optional[AssignmentStore] = None,
    ):
        self.logger = logging.getLogger(self.__class__.__name__)

        self.config = Config(config_path=config_path, watch=watch_config)
        self.config.register_change_callback(self.handle_config_change)

        self._file_handler: Optional[logging.Handler] = None
        self.store = store or self._create_store()
        self.board = AssignmentBoard(self.store)
        self.board.load()

    def _create_store(self) -> AssignmentStore:
        storage_config = self.config.get_section("storage")
        backend = storage_config.get("backend", "sqlite")
        if (backend or "").lower() == "sqlite":
            init_db(self.config.data)
        store = get_store(backend, storage_config, logger=logging.getLogger("onelook.store"))
        if store is None:
            raise ValueError(f"Unknown storage backend: {backend!r}")
        self.logger.info(f"Using {store.backend_type} store, key {store.key!r}")
        return store

    @property
    def view_defaults(self) -> Dict[str, Any]:
        view_config = self.config.get_section("view")
        return {
            "next7_only": bool(view_config.get("next7_only", True)),
            "source": view_config.get("source") or "All",
        }

    @property
    def urgency_thresholds(self) -> Dict[str, int]:
        urgency_config = self.config.get_section("urgency")
        return {
            "critical_days": int(urgency_config.get("critical_days", 1)),
            "warning_days": int(urgency_config.get("warning_days", 3)),
        }

    def setup_logging(self) -> None:
        """Apply level and optional log file from config to the root logger."""
        logging_config = self.config.get_section("logging")
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, str(logging_config.get("level", "INFO")).upper(), logging.INFO))

        log_file = logging_config.get("file")
        if log_file and self._file_handler is None:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            self._file_handler = logging.FileHandler(log_file)
            self._file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root_logger.addHandler(self._file_handler)

        self.logger.debug("Logging configured")

    def handle_config_change(self, new_config: Dict[str, Any]) -> None:
        """Re-apply settings that can change without a restart (logging level; view/urgency are read live)."""
        self.logger.info("Handling config change")
        level = str((new_config.get("logging") or {}).get("level", "INFO")).upper()
        logging.getLogger().setLevel(getattr(logging, level, logging.INFO))

    def close(self) -> None:
        self.config.cleanup()
        if self._file_handler is not None:
            logging.getLogger().removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None
        if self.store.backend_type == "sqlite":
            close_db()


def setup_basic_logging(level: int = logging.WARNING) -> None:
    """Setup basic stderr logging before config is loaded"""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)
        root_logger.setLevel(level)
        logging.debug("Basic logging initialized")
