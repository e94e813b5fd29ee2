"""Query-string codec used to build authorize URLs and token request bodies.

This is not a general URL encoder. ``encode`` joins values
verbatim and ``decode`` only understands the ten reserved characters listed
in ``RESERVED_DECODINGS``; any other percent-encoding passes through as-is.

Because ``encode`` does not re-escape, a decoded value that contains a
reserved character (``code=abc%26123`` decodes to ``abc&123``) is written
back into a form body as ``code=abc&123``, which a form parser splits at the
``&``. Codes made of unreserved characters are unaffected.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

RESERVED_DECODINGS: dict[str, str] = {
    "%24": "$",
    "%26": "&",
    "%2B": "+",
    "%2C": ",",
    "%2F": "/",
    "%3A": ":",
    "%3B": ";",
    "%3D": "=",
    "%3F": "?",
    "%40": "@",
}

Params = Mapping[str, object] | Iterable[tuple[str, object]]


def _pairs(params: Params) -> Iterable[tuple[str, object]]:
    if isinstance(params, Mapping):
        return params.items()
    return params


def encode(params: Params, skip: Iterable[str] = ()) -> str:
    """Join ``params`` into ``key=value&key=value`` in iteration order.

    Keys listed in ``skip`` and entries whose value is ``None`` are left out.
    Pass an ordered mapping (or a sequence of pairs) when the output has to
    be deterministic.

    >>> encode({"a": "1", "secret": "x", "b": "2"}, skip={"secret"})
    'a=1&b=2'
    """
    skipped = set(skip)
    query = ""
    for key, value in _pairs(params):
        if key in skipped or value is None:
            continue
        query += f"{key}={value}&"

    if query.endswith("&"):
        query = query[:-1]
    return query


def decode(raw: str) -> str:
    """Replace the reserved-character encodings in ``raw`` with literals.

    Scans repeatedly until no table entry remains. Every pass that changes
    anything consumes at least one three-character encoding, which bounds
    the number of passes by the length of the input.

    >>> decode("a%3Db%26c")
    'a=b&c'
    """
    decoded = raw
    for _ in range(len(raw) // 3 + 1):
        changed = False
        for encoded, literal in RESERVED_DECODINGS.items():
            for variant in (encoded, encoded.lower()):
                if variant in decoded:
                    decoded = decoded.replace(variant, literal)
                    changed = True
        if not changed:
            break
    return decoded
