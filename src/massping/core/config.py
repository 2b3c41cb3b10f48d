"""Configuration management for massping."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class SweepConfig:
    """Probe queue configuration."""

    timeout: float = 0.05  # seconds to wait for each reply
    max_in_flight: int = 256
    sweep_deadline: float | None = None  # bound on the whole wait(), seconds
    poll_interval: float = 0.05  # reader wake-up to notice shutdown
    receive_buffer: int = 1500


@dataclass
class Config:
    """Main configuration for massping."""

    results_dir: Path = field(default_factory=lambda: Path("./results"))
    sweep: SweepConfig = field(default_factory=SweepConfig)
    verbose: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.results_dir, str):
            self.results_dir = Path(self.results_dir)

    @classmethod
    def from_file(cls, path: Path) -> "Config":
        """Load configuration from JSON file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        config = cls()
        if "results_dir" in data:
            config.results_dir = Path(data["results_dir"])
        if "verbose" in data:
            config.verbose = data["verbose"]

        if "sweep" in data:
            for key, value in data["sweep"].items():
                if hasattr(config.sweep, key):
                    setattr(config.sweep, key, value)

        return config

    def save(self, path: Path) -> None:
        """Save configuration to JSON file."""
        data = {
            "results_dir": str(self.results_dir),
            "verbose": self.verbose,
            "sweep": {
                "timeout": self.sweep.timeout,
                "max_in_flight": self.sweep.max_in_flight,
                "sweep_deadline": self.sweep.sweep_deadline,
                "poll_interval": self.sweep.poll_interval,
                "receive_buffer": self.sweep.receive_buffer,
            },
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)


_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        config_path = Path(os.environ.get("MASSPING_CONFIG", ".massping.json"))
        _config = Config.from_file(config_path)
    return _config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
