import copy
import logging
import os
import re
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml
from watchdog.events import FileSystemEventHandler, FileModifiedEvent
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".onelook"

DEFAULT_CONFIG: Dict[str, Any] = {
    "storage": {
        "backend": "sqlite",  # sqlite | file | memory
        "key": "assignments_v1",
        "path": str(DEFAULT_CONFIG_DIR / "onelook.db"),
        "dir": str(DEFAULT_CONFIG_DIR / "data"),  # used by the file backend
    },
    "view": {
        "next7_only": True,
        "source": "All",
    },
    "urgency": {
        "critical_days": 1,
        "warning_days": 3,
    },
    "logging": {
        "level": "WARNING",
        "file": None,
    },
    "api": {
        "host": "127.0.0.1",
        "port": 8765,
    },
}


def _merge_defaults(defaults: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
    """Return defaults overlaid with data, one level of nested sections deep."""
    merged = copy.deepcopy(defaults)
    for key, value in data.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


class ConfigChangeHandler(FileSystemEventHandler):
    def __init__(self, config):
        self.config = config
        self.last_modified = 0
        self.cooldown = 1.0  # seconds

    def on_modified(self, event):
        if not isinstance(event, FileModifiedEvent):
            return

        current_time = time.time()
        if current_time - self.last_modified < self.cooldown:
            return

        if Path(event.src_path).resolve() == self.config.config_file:
            try:
                self.last_modified = current_time
                self.config.reload()
            except Exception as e:
                logger.error(f"Error handling config change: {e}")


class Config:
    def __init__(self, config_path: Optional[str] = None, watch: bool = False):
        logger.debug("Initializing Config class")

        self.change_callbacks: List[Callable[[Dict[str, Any]], None]] = []
        self._loading = False
        self.observer = None

        if config_path:
            self.config_file = Path(config_path).expanduser().resolve()
            self.config_dir = self.config_file.parent
        else:
            self.config_dir = DEFAULT_CONFIG_DIR
            self.config_file = self.config_dir / "config.yaml"

        logger.debug(f"Using config file: {self.config_file}")

        self._load_env_file()
        self._ensure_config_exists()
        self._load_config()

        if watch:
            self.start_watching()

    def start_watching(self) -> None:
        """Reload the config file whenever it changes on disk."""
        if self.observer is not None:
            return
        self.observer = Observer()
        self.observer.schedule(ConfigChangeHandler(self), str(self.config_dir), recursive=False)
        self.observer.start()
        logger.info(f"Path monitored for reloading: {self.config_dir}")

    def register_change_callback(self, callback: Callable[[Dict[str, Any]], None]) -> None:
        """Register a callback to be called when config changes"""
        self.change_callbacks.append(callback)

    def reload(self) -> None:
        """Reload config and notify listeners"""
        if self._loading:
            return

        self._loading = True
        try:
            logger.info("Config file change detected - reloading configuration")

            # Wait briefly for file to be fully written
            time.sleep(0.1)

            old_config = copy.deepcopy(self.data)
            self._load_config()
            self._log_config_changes(old_config, self.data)

            for callback in self.change_callbacks:
                try:
                    callback(self.data)
                except Exception as e:
                    logger.error(f"Error in config change callback: {e}")
        finally:
            self._loading = False

    def _log_config_changes(self, old_config: Dict, new_config: Dict) -> None:
        """Log the differences between old and new configs"""
        def compare_dict(path: str, dict1: Dict, dict2: Dict) -> None:
            for key in set(dict1.keys()) | set(dict2.keys()):
                current_path = f"{path}.{key}" if path else key
                if key in dict1 and key in dict2:
                    if isinstance(dict1[key], dict) and isinstance(dict2[key], dict):
                        compare_dict(current_path, dict1[key], dict2[key])
                    elif dict1[key] != dict2[key]:
                        logger.info(f"Config changed: {current_path}: {dict1[key]} -> {dict2[key]}")
                elif key in dict1:
                    logger.info(f"Config removed: {current_path}: {dict1[key]}")
                else:
                    logger.info(f"Config added: {current_path}: {dict2[key]}")

        compare_dict("", old_config, new_config)

    def cleanup(self) -> None:
        """Stop the file observer"""
        if self.observer is None:
            return
        self.observer.stop()
        self.observer.join()
        self.observer = None

    def _ensure_config_exists(self) -> None:
        """Create default config if it doesn't exist"""
        if not self.config_dir.exists():
            logger.info(f"Creating config directory: {self.config_dir}")
            self.config_dir.mkdir(parents=True)

        if not self.config_file.exists():
            logger.info(f"Creating default config file: {self.config_file}")
            default_config = copy.deepcopy(DEFAULT_CONFIG)
            default_config["storage"]["path"] = str(self.config_dir / "onelook.db")
            default_config["storage"]["dir"] = str(self.config_dir / "data")
            self.config_file.write_text(yaml.safe_dump(default_config, sort_keys=False))

    def _load_env_file(self) -> None:
        """Load environment variables from .env file"""
        env_files = [
            self.config_dir / ".env",
            self.config_dir.parent / ".env",
            Path.cwd() / ".env",
        ]

        env_file = next((path for path in env_files if path.exists()), None)
        if not env_file:
            logger.debug("No .env file found, skipping environment variable loading")
            return

        logger.info(f"Loading environment variables from: {env_file}")
        try:
            with open(env_file, "r") as f:
                for line in f:
                    line = line.strip()
                    if not line or line.startswith("#"):
                        continue

                    match = re.match(r"^([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$", line)
                    if match:
                        key, value = match.groups()
                        value = value.strip('"').strip("'")
                        # Existing environment wins
                        if key not in os.environ:
                            os.environ[key] = value
                            logger.debug(f"Loaded env var: {key}")
        except OSError as e:
            logger.warning(f"Error loading .env file: {e}")

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively substitute ${VAR_NAME} or $VAR_NAME references in config data"""
        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]
        elif isinstance(data, str):
            if data.startswith("${") and data.endswith("}"):
                return os.environ.get(data[2:-1], data)
            elif data.startswith("$") and len(data) > 1:
                return os.environ.get(data[1:], data)
            return data
        return data

    def _load_config(self) -> None:
        """Load configuration from file"""
        try:
            logger.debug(f"Loading config from: {self.config_file}")
            with open(self.config_file) as f:
                new_data = yaml.safe_load(f)

            if not isinstance(new_data, dict):
                raise ValueError("Invalid config format: root must be a dictionary")

            new_data = self._substitute_env_vars(new_data)
            self.data = _merge_defaults(DEFAULT_CONFIG, new_data)

            for section, key in (("logging", "file"), ("storage", "path"), ("storage", "dir")):
                value = (self.data.get(section) or {}).get(key)
                if value:
                    self.data[section][key] = os.path.expanduser(value)

        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config: {e}")
            if hasattr(self, "data"):
                logger.info("Keeping previous configuration")
            else:
                logger.info("Using default configuration")
                self.data = copy.deepcopy(DEFAULT_CONFIG)

    def get_section(self, name: str) -> Dict[str, Any]:
        """Get a config section (always a dict)"""
        section = self.data.get(name)
        return section if isinstance(section, dict) else {}

