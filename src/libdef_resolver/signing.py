"""Signature headers stamped onto installed libdefs.

An installed file starts with::

    // flow-typed signature: <md5 of everything below this line>
    // flow-typed version: <repo version>

so local edits can be detected before an overwrite.
"""

from __future__ import annotations

import re
from hashlib import md5

SIGNATURE_PREFIX = "// flow-typed signature: "
VERSION_PREFIX = "// flow-typed version: "

_SIGNED_RE = re.compile(r"^// flow-typed signature: (?P<signature>[0-9a-f]{32})\n(?P<body>.*)$", re.S)
_VERSION_RE = re.compile(r"^// flow-typed version: (?P<version>.*)$", re.M)


def _digest(text: str) -> str:
    return md5(text.encode("utf-8")).hexdigest()


def sign_code(code: str, version: str) -> str:
    versioned = f"{VERSION_PREFIX}{version}\n\n{code}"
    return f"{SIGNATURE_PREFIX}{_digest(versioned)}\n{versioned}"


def verify_signature(signed_code: str) -> bool:
    match = _SIGNED_RE.match(signed_code)
    if match is None:
        return False
    return _digest(match.group("body")) == match.group("signature")


def signed_version(signed_code: str) -> str | None:
    """Return the version recorded in a signed file, if any."""
    match = _VERSION_RE.search(signed_code)
    return match.group("version") if match else None
