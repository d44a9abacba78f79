"""Configuration settings using Pydantic Settings.

Usage:
    from protoshadow.config import ShadowSettings

    # Load from environment variables (PROTOSHADOW_*)
    settings = ShadowSettings()

    # Or override with explicit values
    settings = ShadowSettings(auto_safe=True)
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ShadowSettings(BaseSettings):  # type: ignore[misc]
    """Library-wide defaults for shadowing behavior.

    Attributes:
        auto_safe: Constructors make every new instance safe unless told otherwise.
        builtins_opt_out: Foundational templates carry the opt-out marker, keeping
            legacy sharing semantics for them.

    Environment Variables:
        PROTOSHADOW_AUTO_SAFE
        PROTOSHADOW_BUILTINS_OPT_OUT
    """

    model_config = SettingsConfigDict(
        env_prefix="PROTOSHADOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    auto_safe: bool = False
    builtins_opt_out: bool = True
