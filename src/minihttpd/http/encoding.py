"""
=============================================================================
CONTENT-ENCODING NEGOTIATION
=============================================================================

Picks the response Content-Encoding from the client's Accept-Encoding offer.

=============================================================================
ALGORITHM
=============================================================================

    Accept-Encoding: invalid-1, gzip, invalid-2
                          │
                          ▼  split on ",", trim
    ["invalid-1", "gzip", "invalid-2"]
                          │
                          ▼  keep only supported tokens, client order
    ["gzip"]
                          │
                          ├──► header_value = "gzip"     (joined with ", ")
                          └──► transform    = "gzip"     (gzip is present)

    No header, or nothing supported → no Content-Encoding, no transform.

Quality values ("gzip;q=0.5") are not interpreted: a token with
parameters does not equal "gzip" and is dropped like any unknown token.

Tokens are separated by "," with optional surrounding whitespace, so
"gzip,deflate" and "gzip, deflate" both negotiate gzip.

=============================================================================
ACKNOWLEDGED VS APPLIED
=============================================================================

`header_value` echoes every supported token the client offered, while
`transform` names the single encoding that is actually applied. With the
default supported set ("gzip" only) these always agree. A caller passing a
wider `supported` set can get a Content-Encoding header for a token that
has no transform; the echo route then sends the body uncompressed.

=============================================================================
"""

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple

from .compression import available_encodings


# Tokens the server will acknowledge in Content-Encoding
SUPPORTED_ENCODINGS: Tuple[str, ...] = available_encodings()

# The only transform that is applied to bodies
GZIP = "gzip"


@dataclass(frozen=True)
class EncodingChoice:
    """
    Result of negotiation for one request.

    Attributes:
        accepted: Supported tokens offered by the client, in client order
                  (duplicates kept). Empty means "no encoding".
    """

    accepted: Tuple[str, ...] = ()

    @property
    def header_value(self) -> Optional[str]:
        """Value for the Content-Encoding header, or None to omit it."""
        if not self.accepted:
            return None
        return ", ".join(self.accepted)

    @property
    def transform(self) -> Optional[str]:
        """The encoding to apply to the body, or None."""
        return GZIP if GZIP in self.accepted else None

    def __bool__(self) -> bool:
        return bool(self.accepted)


NO_ENCODING = EncodingChoice()


def negotiate_encoding(
    headers: Mapping[str, str],
    supported: Iterable[str] = SUPPORTED_ENCODINGS,
) -> EncodingChoice:
    """
    Intersect the client's Accept-Encoding offer with `supported`.

    Args:
        headers: Request headers (case-sensitive names).
        supported: Tokens the server acknowledges.

    Returns:
        EncodingChoice; NO_ENCODING when nothing matched.
    """
    offer = headers.get("Accept-Encoding")
    if offer is None:
        return NO_ENCODING

    supported = set(supported)
    accepted = tuple(
        token
        for token in (part.strip() for part in offer.split(","))
        if token in supported
    )
    return EncodingChoice(accepted) if accepted else NO_ENCODING
