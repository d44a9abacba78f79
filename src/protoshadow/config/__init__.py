"""Configuration module using Pydantic Settings.

Usage:
    from protoshadow.config import ShadowSettings

    settings = ShadowSettings(auto_safe=True)
"""

from protoshadow.config.settings import ShadowSettings

__all__ = [
    "ShadowSettings",
]
