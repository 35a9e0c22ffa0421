"""
Map arbitrary image content onto a stable (sector, index) slot.

Content is hashed in its data-URL text form
(data:<mime>;base64,<payload>), the same string a browser's
FileReader.readAsDataURL produces for the file.
"""
import base64
import binascii
import io
import math
import re

from PIL import Image, UnidentifiedImageError

from canvas_babel.config import CONFIG
from .digest import digest
from .errors import UnsupportedContentError
from .seeded_random import make_stream

DATA_URL_RE = re.compile(r"^data:([\w.+-]+/[\w.+-]+);base64,(.*)$", re.S)


def detect_mimetype(data: bytes) -> str:
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise UnsupportedContentError("Unsupported content: not a readable image.") from e
    mime = Image.MIME.get(fmt)
    if not mime:
        raise UnsupportedContentError(f"Unsupported content: no MIME type for {fmt}.")
    return mime


def encode_content(data: bytes, mimetype: str = None) -> str:
    """
    Return the data URL of uploaded image bytes.
    A declared image/* type is trusted (SVG included); without one the
    type is detected with Pillow.
    """
    if mimetype and not mimetype.startswith("image/"):
        raise UnsupportedContentError(f"Unsupported content type: {mimetype}")
    if not data:
        raise UnsupportedContentError("Unsupported content: empty upload.")
    mime = mimetype or detect_mimetype(data)
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def decode_content(content: str):
    """data URL -> (mimetype, raw bytes)"""
    m = DATA_URL_RE.match(content or "")
    if not m:
        raise UnsupportedContentError("Unsupported content: expected a base64 data URL.")
    try:
        return m.group(1), base64.b64decode(m.group(2), validate=True)
    except binascii.Error as e:
        raise UnsupportedContentError("Unsupported content: bad base64 payload.") from e


def discover(content: str):
    """
    Derive the slot an encoded content string lands on.
    Returns (sector, index); identical content always lands on the same slot.
    """
    random = make_stream(digest(content))
    chars = CONFIG.id_char_set
    sector = "".join(
        chars[math.floor(random() * len(chars))] for _ in range(CONFIG.sector_id_length)
    )
    index = math.floor(random() * CONFIG.canvases_per_sector)
    return sector, index
