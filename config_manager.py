"""JSON-backed settings for the trace CLI.

``config.json`` holds three sections, each a flat mapping:

- board_settings: ``min_size`` / ``max_size`` / ``default_size`` bound the
  board sizes accepted by the solve, trace and play modes.
- analysis_settings: ``sizes``, ``runs_per_size`` and ``output_dir`` for the
  analyze mode.
- playback_settings: ``delay_seconds`` between replayed frames and
  ``max_steps`` printed before the replay stops.

Missing sections come back as empty dicts; the CLI then keeps the defaults
from ``nqueens_trace.analysis.settings``. Value checks happen there too.
"""
import json
from pathlib import Path

SECTIONS = ("board_settings", "analysis_settings", "playback_settings")


class ConfigManager:
    """Read and write the sections of one configuration file.

    Parameters
    ----------
    config_path : str | os.PathLike, default "config.json"
        JSON file to read at construction time.

    Raises
    ------
    FileNotFoundError
        If ``config_path`` does not exist.
    ValueError
        If the file is not a JSON object, or a known section is not an object.
    """

    def __init__(self, config_path="config.json"):
        self.config_path = Path(config_path)
        self.config = self.load_config()

    def load_config(self):
        if not self.config_path.is_file():
            raise FileNotFoundError(f"No configuration at {self.config_path}")

        with open(self.config_path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.config_path}: top level must be a JSON object")
        for name in SECTIONS:
            if name in data and not isinstance(data[name], dict):
                raise ValueError(f"{self.config_path}: '{name}' must be a JSON object")
        return data

    def save_config(self):
        with open(self.config_path, "w", encoding="utf-8") as f:
            json.dump(self.config, f, indent=2)
            f.write("\n")

    def section(self, name):
        """Return section ``name`` as a dict (empty when absent)."""
        return dict(self.config.get(name, {}))

    def get_board_settings(self):
        return self.section("board_settings")

    def get_analysis_settings(self):
        return self.section("analysis_settings")

    def get_playback_settings(self):
        return self.section("playback_settings")

    def update_setting(self, section, key, value):
        """Set ``section.key`` and write the file back immediately."""
        self.config.setdefault(section, {})[key] = value
        self.save_config()
