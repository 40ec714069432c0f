import logging
import yaml
from typing import Dict, Any, Optional
from chip8_tracer.common.errors import ConfigurationError
from .models import SystemConfig, DisplayConfig

logger = logging.getLogger(__name__)

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> SystemConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration root must be a mapping, got {type(data).__name__}")

        arch = str(data.get("architecture", "CHIP8")).upper()

        display_data = data.get("display", {}) or {}
        display = DisplayConfig(
            scale=self._parse_int(display_data.get("scale", 8)),
            foreground=display_data.get("foreground", "#FFFFFF"),
            background=display_data.get("background", "#000000"),
        )

        keymap = {}
        for host_key, chip8_key in (data.get("keymap", {}) or {}).items():
            key = self._parse_int(chip8_key)
            if not 0 <= key <= 0xF:
                raise ConfigurationError(f"Keymap entry '{host_key}' maps to invalid key {key}")
            keymap[str(host_key).upper()] = key

        unknown = set(data) - {"architecture", "rom", "cpu_hz", "timer_hz", "seed", "display", "keymap"}
        for name in sorted(unknown):
            logger.warning("Ignoring unknown configuration key '%s'", name)

        return SystemConfig(
            architecture=arch,
            rom=data.get("rom"),
            cpu_hz=self._parse_int(data.get("cpu_hz", 500)),
            timer_hz=self._parse_int(data.get("timer_hz", 60)),
            seed=self._parse_optional_int(data.get("seed")),
            display=display,
            keymap=keymap,
        )

    def _parse_optional_int(self, value: Any) -> Optional[int]:
        if value is None:
            return None
        return self._parse_int(value)

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigurationError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ConfigurationError(f"Invalid integer format: {value}")
