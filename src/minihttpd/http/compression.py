"""
=============================================================================
BODY COMPRESSION
=============================================================================

The compression capability used by the echo route: bytes in, encoded bytes
out, looked up by Content-Encoding token.

=============================================================================
HOW GZIP FITS IN
=============================================================================

    Client:  Accept-Encoding: gzip
                    │
                    ▼
    Server:  body = compress(b"abc", "gzip")
             Content-Encoding: gzip
             Content-Length: len(body)     ← length of the COMPRESSED bytes
                    │
                    ▼
    Client:  gzip.decompress(body) == b"abc"

gzip output is never smaller than ~20 bytes (header + trailer), so short
echo strings GROW when compressed. We compress anyway: the client asked
for gzip and checks that it got gzip.

=============================================================================
"""

import gzip
from typing import Callable, Dict, Tuple


# An encoder takes the plain body and returns the encoded body
Encoder = Callable[[bytes], bytes]

DEFAULT_LEVEL = 6


def gzip_encode(data: bytes, level: int = DEFAULT_LEVEL) -> bytes:
    """
    Compress data into a complete gzip member.

    Args:
        data: Plain bytes.
        level: 1 (fastest) to 9 (smallest). 6 is zlib's default balance.

    Returns:
        gzip-framed bytes that gzip.decompress() turns back into data.
    """
    return gzip.compress(data, compresslevel=level)


# ─────────────────────────────────────────────────────────────────────────
# ENCODER REGISTRY
# ─────────────────────────────────────────────────────────────────────────
# Content-Encoding token → encoder. Adding a key here makes the token
# negotiable (see encoding.SUPPORTED_ENCODINGS).
# ─────────────────────────────────────────────────────────────────────────
ENCODERS: Dict[str, Encoder] = {
    "gzip": gzip_encode,
}


def available_encodings() -> Tuple[str, ...]:
    """Tokens that have an encoder, in registration order."""
    return tuple(ENCODERS)


def compress(data: bytes, encoding: str) -> bytes:
    """
    Encode data with the named content-coding.

    Raises:
        KeyError: No encoder is registered for `encoding`.
    """
    try:
        encoder = ENCODERS[encoding]
    except KeyError:
        raise KeyError(f"No encoder for content-coding {encoding!r}") from None
    return encoder(data)
