from __future__ import annotations

from typing import Protocol

from .model import SystemSettings


class SettingsProvider(Protocol):
    def get(self) -> SystemSettings:
        """Read the current settings; missing keys fall back to defaults."""

        raise NotImplementedError
