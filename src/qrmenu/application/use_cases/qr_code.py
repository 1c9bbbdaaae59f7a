from __future__ import annotations

from dataclasses import dataclass

from qrmenu.application.dto.responses import MenuLinkResponse
from qrmenu.application.ports.qr import QrRenderer
from qrmenu.application.ports.repositories import RestaurantRepository
from qrmenu.application.use_cases.context import AuthContext
from qrmenu.application.use_cases.restaurants import load_owned_restaurant
from qrmenu.domain.common.ids import RestaurantId

QR_WIDTH_PX = 400
QR_DARK = "#000000"
QR_LIGHT = "#ffffff"

_MEDIA_TYPES = {
    "png": "image/png",
    "svg": "image/svg+xml",
}


class UnsupportedQrFormatError(Exception):
    pass


@dataclass(frozen=True)
class QrCodeImage:
    content: bytes
    media_type: str
    filename: str
    menu_url: str


def public_menu_url(base_url: str, slug: str) -> str:
    return f"{base_url.rstrip('/')}/menu/{slug}"


class GetMenuLink:
    def __init__(self, restaurant_repository: RestaurantRepository, public_base_url: str) -> None:
        self._restaurant_repository = restaurant_repository
        self._public_base_url = public_base_url

    def execute(self, auth: AuthContext, restaurant_id: RestaurantId) -> MenuLinkResponse:
        restaurant = load_owned_restaurant(self._restaurant_repository, auth, restaurant_id)
        return MenuLinkResponse(url=public_menu_url(self._public_base_url, restaurant.slug))


class RenderMenuQrCode:
    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        renderer: QrRenderer,
        public_base_url: str,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._renderer = renderer
        self._public_base_url = public_base_url

    def execute(
        self,
        auth: AuthContext,
        restaurant_id: RestaurantId,
        image_format: str = "png",
        use_theme: bool = False,
    ) -> QrCodeImage:
        media_type = _MEDIA_TYPES.get(image_format)
        if media_type is None:
            raise UnsupportedQrFormatError(
                f"unsupported QR format: {image_format}; expected one of {sorted(_MEDIA_TYPES)}"
            )

        restaurant = load_owned_restaurant(self._restaurant_repository, auth, restaurant_id)
        menu_url = public_menu_url(self._public_base_url, restaurant.slug)
        dark = restaurant.primary_color if use_theme else QR_DARK
        content = self._renderer.render(
            menu_url,
            kind=image_format,
            dark=dark,
            light=QR_LIGHT,
            width_px=QR_WIDTH_PX,
        )
        return QrCodeImage(
            content=content,
            media_type=media_type,
            filename=f"{restaurant.slug}-qr.{image_format}",
            menu_url=menu_url,
        )
