"""Internal controller exports for digipostefs."""

from __future__ import annotations

from .digiposte_controller import DigiposteController

__all__ = ["DigiposteController"]
