"""
Store Core Config — Store Settings
====================================
Doctrine: No hardcoded identities in engine logic.
The administrator identity and the refund window come from
configuration data, never from source code paths inside policies.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional


DEFAULT_REFUND_WINDOW_TICKS = 100

ENV_ADMINISTRATOR_ID = "STORE_ADMINISTRATOR_ID"
ENV_REFUND_WINDOW_TICKS = "STORE_REFUND_WINDOW_TICKS"


class SettingsError(ValueError):
    """Configuration is missing or malformed."""
    pass


# ══════════════════════════════════════════════════════════════
# STORE SETTINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StoreSettings:
    """
    Construction-time settings for a store.

    administrator_id is fixed for the lifetime of the store;
    there is no ownership transfer.
    """

    administrator_id: str
    refund_window_ticks: int = DEFAULT_REFUND_WINDOW_TICKS

    def __post_init__(self) -> None:
        if not self.administrator_id or not isinstance(self.administrator_id, str):
            raise SettingsError("administrator_id must be a non-empty string.")

        if (
            isinstance(self.refund_window_ticks, bool)
            or not isinstance(self.refund_window_ticks, int)
            or self.refund_window_ticks <= 0
        ):
            raise SettingsError(
                f"refund_window_ticks must be a positive integer, "
                f"got {self.refund_window_ticks!r}."
            )

    def with_overrides(self, **changes) -> StoreSettings:
        """Return a copy with the given fields replaced (validated again)."""
        return replace(self, **changes)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> StoreSettings:
        """
        Build settings from environment variables.

        STORE_ADMINISTRATOR_ID     required
        STORE_REFUND_WINDOW_TICKS  optional, defaults to 100
        """
        env = os.environ if environ is None else environ

        administrator_id = env.get(ENV_ADMINISTRATOR_ID, "").strip()
        if not administrator_id:
            raise SettingsError(f"{ENV_ADMINISTRATOR_ID} is not set.")

        raw_window = env.get(ENV_REFUND_WINDOW_TICKS)
        if raw_window is None or not raw_window.strip():
            return cls(administrator_id=administrator_id)

        try:
            window = int(raw_window)
        except ValueError:
            raise SettingsError(
                f"{ENV_REFUND_WINDOW_TICKS} must be an integer, got {raw_window!r}."
            ) from None

        return cls(administrator_id=administrator_id, refund_window_ticks=window)
