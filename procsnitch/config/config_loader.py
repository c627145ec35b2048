"""
Configuration loader.

Reads config.yaml from a configuration directory, optionally overlaid with
config_<env>.yaml, and turns it into a validated SnitchConfig.
"""
from pathlib import Path
from typing import Any, Dict

import yaml

from procsnitch.config.snitch_config import SnitchConfig
from procsnitch.consts.SamplerType import SamplerType
from procsnitch.exceptions import ConfigError
from procsnitch.util.duration_utils import parse_duration

REQUIRED_KEYS = ("duration", "sampling")


class ConfigLoader:

    def __init__(self, config_path: Path, env: str = None):
        self.config_path = Path(config_path)
        self.env = env
        self.config_data = self._load_config()

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Configuration file not found: {path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Top level of {path} must be a mapping")
        return data

    def _load_config(self) -> SnitchConfig:
        """
        Load and parse the configuration from YAML files.
        Supports environment-specific overrides via config_<env>.yaml

        Returns:
            SnitchConfig: Validated configuration

        Raises:
            ConfigError: On missing keys, bad durations or an unknown sampler
        """
        data = self._read_yaml(self.config_path / "config.yaml")

        if self.env:
            # dict.update() overwrites existing keys
            data.update(self._read_yaml(self.config_path / f"config_{self.env}.yaml"))

        return self.parse(data)

    @staticmethod
    def parse(data: Dict[str, Any]) -> SnitchConfig:
        for key in REQUIRED_KEYS:
            if key not in data:
                raise ConfigError(f"Missing required configuration key: '{key}'")
        if not data.get("command") and not data.get("process_name"):
            raise ConfigError("Either 'command' or 'process_name' must be configured")

        config = SnitchConfig()
        config.command = data.get("command") or ""
        config.arguments = [str(a) for a in data.get("arguments") or []]
        config.directory = data.get("directory") or ""
        config.process_name = data.get("process_name")
        config.output_dir = Path(data.get("output_dir") or "results")

        config.duration = parse_duration(data["duration"])
        config.sampling = parse_duration(data["sampling"])
        if config.duration <= 0:
            raise ConfigError(f"'duration' must be positive: {data['duration']!r}")
        if config.sampling <= 0:
            raise ConfigError(f"'sampling' must be positive: {data['sampling']!r}")

        executions = data.get("executions", 1)
        if not isinstance(executions, int) or isinstance(executions, bool) or executions < 1:
            raise ConfigError(f"'executions' must be a positive integer: {executions!r}")
        config.executions = executions

        selector = data.get("sampler", SamplerType.TOP.value)
        try:
            config.sampler = SamplerType(selector)
        except ValueError as e:
            known = ", ".join(t.value for t in SamplerType)
            raise ConfigError(f"Unknown sampler '{selector}' (known: {known})") from e

        return config
