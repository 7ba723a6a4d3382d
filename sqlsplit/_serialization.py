from typing import Any

import msgspec

__all__ = ("encode_json",)

_encoder = msgspec.json.Encoder(enc_hook=str)


def encode_json(data: Any) -> str:
    """Encode data to a JSON string.

    Values msgspec cannot natively encode are rendered with :func:`str`.
    """
    return _encoder.encode(data).decode("utf-8")
