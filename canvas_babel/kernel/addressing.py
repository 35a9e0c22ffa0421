"""
Canonical canvas keys: sector-{sector}:canvas-{index}

A sector is any string of CONFIG.sector_id_length characters from
CONFIG.id_char_set. There is no registry; validity is structural.
"""
import random
import re

from canvas_babel.config import CONFIG
from .digest import digest
from .errors import ValidationError

KEY_RE = re.compile(r"^sector-([^:]*):canvas-(\d+)$")

_system_random = random.SystemRandom()


def canonical_key(sector: str, index: int) -> str:
    return f"sector-{sector}:canvas-{index}"


def parse_canonical_key(key: str):
    m = KEY_RE.match(key or "")
    if not m:
        raise ValidationError(f"Malformed canvas id: {(key or '')[:40]!r}")
    sector, index = m.group(1), int(m.group(2))
    validate_sector(sector)
    validate_canvas_index(index)
    return sector, index


def derive_seed(key: str) -> int:
    return digest(key)


def random_sector(length: int = CONFIG.sector_id_length, rng=None) -> str:
    """Fresh sector id. Not reproducible unless a seeded `rng` is passed."""
    rng = rng or _system_random
    chars = CONFIG.id_char_set
    return "".join(chars[int(rng.random() * len(chars))] for _ in range(length))


def is_valid_sector(sector) -> bool:
    return (
        isinstance(sector, str)
        and len(sector) == CONFIG.sector_id_length
        and all(c in CONFIG.id_char_set for c in sector)
    )


def validate_sector(sector) -> str:
    if is_valid_sector(sector):
        return sector
    if not isinstance(sector, str) or len(sector) != CONFIG.sector_id_length:
        raise ValidationError(
            f"Invalid Sector ID. Must be {CONFIG.sector_id_length} characters long."
        )
    bad = sorted({c for c in sector if c not in CONFIG.id_char_set})
    if bad:
        raise ValidationError(
            f"Invalid Sector ID. Only '{CONFIG.id_char_set}' allowed, got {''.join(bad)[:16]!r}."
        )
    return sector


def validate_canvas_index(index) -> int:
    if isinstance(index, bool) or not isinstance(index, int):
        raise ValidationError(f"Invalid canvas index: {index!r}")
    if not 0 <= index < CONFIG.canvases_per_sector:
        raise ValidationError(
            f"Canvas index must be in [0, {CONFIG.canvases_per_sector}), got {index}."
        )
    return index


def parse_canvas_index(raw) -> int:
    """Parse a textual canvas index (e.g. a link parameter)."""
    if isinstance(raw, int) and not isinstance(raw, bool):
        return validate_canvas_index(raw)
    text = (raw or "").strip() if isinstance(raw, str) else ""
    if not (text.isascii() and text.isdigit()):
        raise ValidationError(f"Canvas index must be a non-negative integer, got {raw!r}.")
    return validate_canvas_index(int(text))
