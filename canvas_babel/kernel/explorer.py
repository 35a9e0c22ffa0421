import logging
from dataclasses import dataclass
from typing import List, Optional

from canvas_babel.config import CONFIG
from .addressing import canonical_key, derive_seed, validate_canvas_index, validate_sector
from .bookmarks import BookmarkStore
from .discovery import decode_content, discover, encode_content
from .errors import ValidationError
from .link_codec import ViewRequest, build_link
from .render import download_name, render_svg
from .synthesizer import ImageDescription, synthesize

logger = logging.getLogger(__name__)


def sector_label(sector: str) -> str:
    return f"Sector: {sector[:10]}...{sector[-10:]}"


@dataclass
class CanvasView:
    sector: str
    index: int
    content: Optional[str] = None

    @property
    def id(self) -> str:
        return canonical_key(self.sector, self.index)

    @property
    def is_uploaded(self) -> bool:
        return self.content is not None

    @property
    def seed(self) -> Optional[int]:
        return None if self.is_uploaded else derive_seed(self.id)

    @property
    def description(self) -> Optional[ImageDescription]:
        return None if self.is_uploaded else synthesize(self.seed)

    def to_dict(self, with_description=True):
        d = {"id": self.id, "sector": self.sector, "canvas": self.index, "isUploaded": self.is_uploaded}
        if self.is_uploaded:
            d["data"] = self.content
        else:
            desc = self.description
            d["seed"] = desc.seed
            d["descriptor"] = desc.descriptor()
            if with_description:
                d["description"] = desc.to_dict()
        return d


@dataclass
class Session:
    """Per-client viewing state; passed explicitly to Explorer."""
    current_sector: Optional[str] = None
    active_canvas: Optional[CanvasView] = None


class Explorer:
    def __init__(self, store: BookmarkStore, session: Optional[Session] = None, link_base: str = ""):
        self.store = store
        self.session = session or Session()
        self.link_base = link_base

    def load_sector(self, sector: str) -> List[CanvasView]:
        validate_sector(sector)
        self.session.current_sector = sector
        logger.info(f"Loaded {sector_label(sector)}")
        return [CanvasView(sector, i) for i in range(CONFIG.canvases_per_sector)]

    def open_canvas(self, sector: str, index: int, content: Optional[str] = None) -> CanvasView:
        validate_sector(sector)
        validate_canvas_index(index)
        if content is not None:
            decode_content(content)
        view = CanvasView(sector, index, content)
        self.session.active_canvas = view
        logger.debug(f"Opened {view.id[:24]}... uploaded={view.is_uploaded}")
        return view

    def open_request(self, req: ViewRequest) -> CanvasView:
        """Deep link: uploaded content bypasses synthesis, otherwise load the sector too."""
        if not req.is_uploaded:
            self.load_sector(req.sector)
        return self.open_canvas(req.sector, req.index, req.content)

    def close_canvas(self):
        self.session.active_canvas = None

    def upload(self, data: bytes, mimetype: Optional[str] = None) -> CanvasView:
        content = encode_content(data, mimetype)
        sector, index = discover(content)
        logger.info(f"Discovered {len(data)} bytes at {sector[:10]}... canvas {index}")
        return self.open_canvas(sector, index, content)

    def _active(self) -> CanvasView:
        if self.session.active_canvas is None:
            raise ValidationError("No canvas is open.")
        return self.session.active_canvas

    def toggle_bookmark(self) -> bool:
        view = self._active()
        marked = self.store.toggle(view.sector, view.index, view.content)
        logger.info(f"Bookmark {'added' if marked else 'removed'}: {view.id[:24]}...")
        return marked

    def is_bookmarked(self) -> bool:
        view = self.session.active_canvas
        return view is not None and self.store.is_bookmarked(view.id)

    def share_link(self) -> str:
        view = self._active()
        return build_link(self.link_base, view.sector, view.index, view.content)

    def download(self):
        """-> (filename, mimetype, body bytes)"""
        view = self._active()
        if view.is_uploaded:
            mime, body = decode_content(view.content)
            return download_name(view.id, uploaded=True), mime, body
        svg = render_svg(view.description)
        return download_name(view.id), "image/svg+xml", svg.encode("utf-8")
