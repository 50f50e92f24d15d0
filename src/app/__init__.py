"""Application bootstrap helpers for the Bulgarian lessons bot."""

from .runtime import run_bot
from .settings import AppSettings

__all__ = ["run_bot", "AppSettings"]
