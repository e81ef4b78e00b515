from __future__ import annotations

import re
import secrets
import string
import unicodedata
from typing import Iterable, Mapping

# uppercase + digits without the easily-confused ones (I, O, 0, 1)
CONTEST_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
PIN_ALPHABET = CONTEST_CODE_ALPHABET
_ID_ALPHABET = string.ascii_lowercase + string.digits


def slugify(name: str) -> str:
    """
    URL-safe slug: strips accents, collapses anything non-alphanumeric to '-'.
    """
    slug = (
        unicodedata.normalize("NFKD", name or "")
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    slug = re.sub(r"[^a-zA-Z0-9]+", "-", slug)
    return slug.strip("-").lower()


def short_id(length: int = 6) -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def generate_contest_code(length: int = 6) -> str:
    return "".join(secrets.choice(CONTEST_CODE_ALPHABET) for _ in range(length))


def generate_pin(length: int = 6) -> str:
    return "".join(secrets.choice(PIN_ALPHABET) for _ in range(length))


def generate_contest_slug(name: str, unique_id: str) -> str:
    base = slugify(name) or "contest"
    return f"{base}-{unique_id}"


def generate_player_slug(name: str, existing_players: Iterable[Mapping]) -> str:
    """First name, lowercased; suffixed -2, -3, ... when already taken."""
    first = (name or "").split(" ")[0].lower()
    first = re.sub(r"[^a-z0-9]", "", first) or "player"
    taken = {p.get("slug") for p in existing_players}

    if first not in taken:
        return first

    counter = 2
    while f"{first}-{counter}" in taken:
        counter += 1
    return f"{first}-{counter}"
