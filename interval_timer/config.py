import json
from pathlib import Path

APP_DIR_NAME = ".intervaltimer"
SETTINGS_FILE = "settings.json"
DATA_FILE = "intervals.json"

DEFAULTS = {
    "theme": "Matrix",
    "sound": "beep",
    "tick_ms": 1000,
    "default_kind": "Run",
    "default_duration": "60",
    "reset_clears_intervals": True,
    "last_date": None,
}


class ConfigManager:
    """Persistent user settings stored as JSON next to the intervals blob"""
    def __init__(self, config_dir=None):
        self.config_dir = Path(config_dir) if config_dir else Path.home() / APP_DIR_NAME
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file = self.config_dir / SETTINGS_FILE
        self.data = self.load()

    @property
    def data_file(self):
        return self.config_dir / DATA_FILE

    def load(self):
        """Load settings from disk, falling back to defaults"""
        settings = dict(DEFAULTS)

        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    raise ValueError("settings must be a JSON object")
                for key, value in loaded.items():
                    if not self._valid(key, value):
                        print(f"Config value ignored: {key}={value!r}")
                        continue
                    settings[key] = value
            except (OSError, ValueError) as e:
                print(f"Load config error: {e}")

        return settings

    @staticmethod
    def _valid(key, value):
        """Stored values must keep the type of their default"""
        default = DEFAULTS.get(key)
        if default is None:
            return key not in DEFAULTS or value is None or isinstance(value, str)
        if type(value) is not type(default):
            return False
        if key == "tick_ms":
            return value > 0
        return True

    def save(self):
        try:
            with open(self.config_file, 'w') as f:
                json.dump(self.data, f, indent=2)
        except (OSError, TypeError) as e:
            print(f"Save config error: {e}")

    def get(self, key, default=None):
        return self.data.get(key, DEFAULTS.get(key) if default is None else default)

    def set(self, key, value):
        self.data[key] = value
        self.save()
