from __future__ import annotations

import io
from typing import Callable, Protocol

from PIL import Image, UnidentifiedImageError

from ..core.enums import ScanErrorReason
from ..core.exceptions import ScanError

OnDecode = Callable[[str], None]
OnError = Callable[[Exception], None]

_FAILURE = ScanErrorReason.DECODER_FAILURE.value


class Decoder(Protocol):
    """Contract of a QR decoding source (camera, uploaded image, ...)."""

    def start(self, on_decode: OnDecode, on_error: OnError) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError


class ImageQRDecoder:
    """Decode the first QR code found in an uploaded image.

    Decoding happens synchronously inside `start`, so exactly one callback fires
    before `start` returns.
    """

    def __init__(self, image: bytes):
        self._image = image
        self._stopped = False

    def start(self, on_decode: OnDecode, on_error: OnError) -> None:
        self._stopped = False
        try:
            # pyzbar needs the native zbar library; only load it when an image is scanned
            from pyzbar.pyzbar import decode as pyzbar_decode
        except ImportError as e:
            on_error(ScanError(f"QR decoder unavailable: {e}", reason=_FAILURE))
            return

        try:
            img = Image.open(io.BytesIO(self._image)).convert("RGB")
            decoded = pyzbar_decode(img)
        except (UnidentifiedImageError, OSError) as e:
            on_error(ScanError(f"Unreadable image: {e}", reason=_FAILURE))
            return

        if self._stopped:
            return
        if not decoded:
            on_error(ScanError("No QR code found in image", reason=_FAILURE))
            return

        try:
            code = decoded[0].data.decode("utf-8")
        except UnicodeDecodeError:
            on_error(ScanError("QR code does not contain text", reason=_FAILURE))
            return
        on_decode(code)

    def stop(self) -> None:
        self._stopped = True
