from __future__ import annotations

import io

import segno

from qrmenu.application.ports.qr import QrRenderer

QUIET_ZONE_MODULES = 2


class SegnoQrRenderer(QrRenderer):
    def __init__(self, error: str = "m") -> None:
        self._error = error

    def render(self, data: str, kind: str, dark: str, light: str, width_px: int) -> bytes:
        code = segno.make(data, error=self._error, micro=False)
        modules, _ = code.symbol_size(scale=1, border=QUIET_ZONE_MODULES)
        scale = max(1, width_px // modules)

        buffer = io.BytesIO()
        code.save(
            buffer,
            kind=kind,
            scale=scale,
            border=QUIET_ZONE_MODULES,
            dark=dark,
            light=light,
        )
        return buffer.getvalue()
