"""Configuration persistence manager for rectcanvas.

This module handles loading and saving of generation options to/from JSON files.
"""

import json
from pathlib import Path
from typing import Optional, Tuple

from errors import InvalidOptionsError
from models import CONFIG_FILE, GenerationOptions


class ConfigManager:
    """Handles loading and saving of generation options."""

    def __init__(self, config_path: Path = CONFIG_FILE):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file (defaults to ~/.rectcanvas_config.json)
        """
        self.config_path = Path(config_path)

    def load(self) -> GenerationOptions:
        """Load options from file, returning defaults if not found.

        Returns:
            GenerationOptions with loaded or default values
        """
        options = GenerationOptions()

        if not self.config_path.exists():
            return options

        try:
            with open(self.config_path, "r") as f:
                data = json.load(f)
            # Missing keys fall back to defaults
            loaded = GenerationOptions.from_dict(data)
            loaded.validate()
            print(f"✓ Loaded configuration from {self.config_path}")
            return loaded
        except (OSError, ValueError, TypeError, AttributeError) as e:
            # InvalidOptionsError and json.JSONDecodeError are ValueErrors
            print(f"Warning: Could not load config file: {e}")

        return options

    def save(self, options: GenerationOptions) -> Tuple[bool, Optional[str]]:
        """Save options to file.

        Args:
            options: GenerationOptions to save

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        try:
            options.validate()
            with open(self.config_path, "w") as f:
                json.dump(options.to_dict(), f, indent=2)
            return True, None
        except (OSError, InvalidOptionsError) as e:
            return False, str(e)
