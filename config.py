"""Configuration management for Strongbox.

Reads configuration from ~/.config/strongbox.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass, replace
import tomllib
import tomli_w

CORRUPT_SNAPSHOT_POLICIES = ("fresh", "abort")


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    data_dir: Path
    snapshot_filename: str
    on_corrupt_snapshot: str  # "fresh" or "abort"
    log_level: str
    log_dir: Path
    max_pin_attempts: int = 3
    statement_length: int = 10
    currency_symbol: str = "₹"
    enable_reset: bool = False

    def __post_init__(self):
        if self.on_corrupt_snapshot not in CORRUPT_SNAPSHOT_POLICIES:
            raise ValueError(
                f"on_corrupt_snapshot must be one of {CORRUPT_SNAPSHOT_POLICIES}, "
                f"got '{self.on_corrupt_snapshot}'"
            )

    @property
    def snapshot_path(self) -> Path:
        """Get the full snapshot path (data_dir/filename)."""
        return self.data_dir / self.snapshot_filename

    def with_snapshot_path(self, path) -> "Config":
        """Return a copy of this config that reads and writes the given snapshot."""
        path = Path(path).expanduser()
        return replace(self, data_dir=path.parent, snapshot_filename=path.name)

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "strongbox"
        return cls(
            base_dir=base_dir,
            data_dir=base_dir / "data",
            snapshot_filename="ledger.json",
            on_corrupt_snapshot="fresh",
            log_level="INFO",
            log_dir=base_dir / "logs",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "strongbox.toml"


def load_config(config_path: Path = None) -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Args:
        config_path: Optional config file location. Defaults to get_config_path().

    Returns:
        Config object with loaded or default values.
    """
    config_path = config_path or get_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config, config_path)
        return config

    # Load existing config
    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse with defaults for any missing values
    base_dir = Path(data.get("base_dir", Path.home() / "data" / "strongbox"))

    storage_config = data.get("storage", {})
    data_dir = Path(storage_config.get("data_dir", base_dir / "data"))
    snapshot_filename = storage_config.get("snapshot_filename", "ledger.json")
    on_corrupt_snapshot = storage_config.get("on_corrupt_snapshot", "fresh")

    log_config = data.get("logging", {})
    log_level = log_config.get("level", "INFO")
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    session_config = data.get("session", {})

    return Config(
        base_dir=base_dir,
        data_dir=data_dir,
        snapshot_filename=snapshot_filename,
        on_corrupt_snapshot=on_corrupt_snapshot,
        log_level=log_level,
        log_dir=log_dir,
        max_pin_attempts=int(session_config.get("max_pin_attempts", 3)),
        statement_length=int(session_config.get("statement_length", 10)),
        currency_symbol=session_config.get("currency_symbol", "₹"),
        enable_reset=bool(data.get("enable_reset", False)),
    )


def _write_config(config: Config, config_path: Path) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
        config_path: Destination file.
    """
    # Ensure config directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # Convert config to TOML structure
    data = {
        "base_dir": str(config.base_dir),
        "enable_reset": config.enable_reset,
        "storage": {
            "data_dir": str(config.data_dir),
            "snapshot_filename": config.snapshot_filename,
            "on_corrupt_snapshot": config.on_corrupt_snapshot,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "session": {
            "max_pin_attempts": config.max_pin_attempts,
            "statement_length": config.statement_length,
            "currency_symbol": config.currency_symbol,
        },
    }

    # Write TOML file
    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
