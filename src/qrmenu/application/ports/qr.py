from __future__ import annotations

from typing import Protocol


class QrRenderer(Protocol):
    def render(self, data: str, kind: str, dark: str, light: str, width_px: int) -> bytes: ...
