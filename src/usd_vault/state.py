"""Application state container."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .settings import VaultSettings


@dataclass
class AppState:
    """Container for application-wide state and dependencies.

    Passed to CLI commands to avoid global state and enable testing.
    """

    settings: VaultSettings
    logger: logging.Logger
