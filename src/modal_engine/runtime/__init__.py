"""Runtime services: telemetry and editor settings."""

from .settings import EditorSettings

__all__ = ["EditorSettings"]
