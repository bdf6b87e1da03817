# stat codec.
# Card stats travel as opaque "FHE-" tokens. This is a reversible encoding for
# gameplay only, there is no key and no security claim behind it.
import base64
import binascii
import re

from draft_server.game.errors import DecodeError

TOKEN_PREFIX = "FHE-"

_NUMBER = re.compile(r"^-?\d+(\.\d+)?([eE][-+]?\d+)?$")


def encode(value) -> str:
    """Encode a numeric stat into an opaque token.

    :param value: int or float stat value.
    :return: token string like "FHE-NQ==".
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Cannot encode non-numeric value {value!r}")
    payload = base64.b64encode(str(value).encode("ascii")).decode("ascii")
    return f"{TOKEN_PREFIX}{payload}"


def decode(token: str):
    """Decode a token produced by `encode` back into its number.

    Raises DecodeError for anything `encode` could not have produced.
    """
    if not isinstance(token, str) or not token.startswith(TOKEN_PREFIX):
        raise DecodeError("Token is missing the FHE- prefix", token=str(token))

    try:
        text = base64.b64decode(token[len(TOKEN_PREFIX):], validate=True).decode("ascii")
    except (binascii.Error, UnicodeDecodeError):
        raise DecodeError("Token payload is not valid base64", token=token)

    if not _NUMBER.match(text):
        raise DecodeError("Token payload is not a number", token=token)
    if set(text) & {".", "e", "E"}:
        return float(text)
    return int(text)
