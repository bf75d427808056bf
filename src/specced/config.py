"""Diagnostic mode configuration.

Resolvers warn about unrecognized variant names and option values while
developing. Setting SPECCED_ENV=production turns those warnings off.

The environment is read once, at import. Nothing writes the setting
afterwards; a single resolver can override it with `diagnostics=`.
"""

import os
from dataclasses import dataclass
from typing import Optional


ENV_VAR = "SPECCED_ENV"
PRODUCTION = "production"


@dataclass(frozen=True)
class DiagnosticsConfig:
    """Process-wide diagnostics setting."""

    enabled: bool = True

    @classmethod
    def from_env(cls) -> "DiagnosticsConfig":
        """Load the setting from SPECCED_ENV."""
        mode = os.getenv(ENV_VAR, "").strip().lower()
        return cls(enabled=mode != PRODUCTION)


_config = DiagnosticsConfig.from_env()


def get_config() -> DiagnosticsConfig:
    """Get the process configuration instance."""
    return _config


def diagnostics_enabled(override: Optional[bool] = None) -> bool:
    """Resolve an explicit per-resolver override against the process setting."""
    if override is not None:
        return override
    return _config.enabled
