"""
Imprint Configuration Management
=================================

Centralized configuration for the Imprint toolkit using Python
dataclasses and TOML-based persistence.

Configuration is kept separate from code: every tunable lives in an
``imprint.toml`` file at the project root and falls back to the
dataclass defaults declared here.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - PEP 681 -- Data Class Transforms (2022).
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "imprint.toml"


# ========================== Tool-Specific Configs ==========================


@dataclass(frozen=False, slots=True)
class SearchConfig:
    """Configuration for the structural class search.

    Controls how archive entries are selected and decoded, and which
    cardinality policy the command line applies by default.
    """

    # Candidate selection
    class_suffix: str = ".class"
    max_entry_size: int = 0  # bytes, 0 = unlimited

    # Decoding
    parse_bytecode: bool = False

    # Reporting
    exact: bool = True
    output_format: str = "table"


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings shared across all Imprint modules.

    Controls logging verbosity and destination for every component.
    """

    log_level: str = "INFO"
    log_file: str | None = None
    log_json: bool = False
    debug: bool = False


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class ImprintConfig:
    """Master configuration aggregating global and search settings.

    Usage:
        >>> config = ImprintConfig.load()                  # from default path
        >>> config = ImprintConfig.load("custom.toml")     # from custom path
        >>> print(config.search.class_suffix)
        '.class'
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    search: SearchConfig = field(default_factory=SearchConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> ImprintConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``imprint.toml`` in the
        project root.  Missing keys fall back to dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.
                  Defaults to ``<project_root>/imprint.toml``.

        Returns:
            A fully-populated :class:`ImprintConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
            tomllib.TOMLDecodeError: If the file is not valid TOML.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            search=cls._build_section(SearchConfig, raw.get("search", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored so that newer config
        files still load on older releases.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


# ========================= Module-level convenience ========================

def get_config(path: str | Path | None = None) -> ImprintConfig:
    """Module-level convenience wrapper around :meth:`ImprintConfig.load`.

    Caches the result so that repeated imports share one instance.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = ImprintConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]
