"""
Shareable link parameters: sector, canvas and (uploaded content only) data.
"""
from dataclasses import dataclass
from typing import Optional
import urllib.parse as _url

from .addressing import parse_canvas_index, validate_canvas_index, validate_sector
from .errors import ValidationError

SECTOR = "sector"
CANVAS = "canvas"
DATA = "data"


@dataclass(frozen=True)
class ViewRequest:
    sector: str
    index: int
    content: Optional[str] = None

    @property
    def is_uploaded(self) -> bool:
        return self.content is not None


def encode(sector: str, index: int, content: Optional[str] = None) -> dict:
    params = {SECTOR: sector, CANVAS: str(index)}
    # procedural canvases are reproducible from the address alone
    if content is not None:
        params[DATA] = content
    return params


def decode(params) -> ViewRequest:
    sector = params.get(SECTOR)
    raw_index = params.get(CANVAS)
    if not sector or raw_index is None or raw_index == "":
        raise ValidationError("Link requires both 'sector' and 'canvas' parameters.")
    validate_sector(sector)
    index = parse_canvas_index(raw_index)
    content = params.get(DATA)
    if content == "":
        raise ValidationError("Link parameter 'data' must not be empty.")
    return ViewRequest(sector, index, content)


def build_link(base_url: str, sector: str, index: int, content: Optional[str] = None) -> str:
    validate_sector(sector)
    validate_canvas_index(index)
    base = base_url.split("?", 1)[0]
    return base + "?" + _url.urlencode(encode(sector, index, content))


def parse_link(url: str) -> ViewRequest:
    query = _url.urlsplit(url).query
    return decode(dict(_url.parse_qsl(query, keep_blank_values=True)))
