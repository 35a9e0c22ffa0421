import logging

from flask import Blueprint, request, jsonify, Response

from canvas_babel.config import CONFIG, settings
from canvas_babel.kernel.addressing import random_sector
from canvas_babel.kernel.bookmarks import BookmarkStore
from canvas_babel.kernel.errors import BabelError, ValidationError
from canvas_babel.kernel.explorer import Explorer, Session, sector_label
from canvas_babel.kernel.link_codec import CANVAS, DATA, SECTOR, ViewRequest, decode

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__, url_prefix="/")

store = BookmarkStore(settings.BOOKMARKS_PATH)
store.load()


def _explorer() -> Explorer:
    # one Session per request; only the bookmark store is shared
    return Explorer(store, Session(), link_base=settings.LINK_BASE)


@bp.errorhandler(BabelError)
def babel_error(e):
    if e.status >= 500:
        logger.error(f"{type(e).__name__}: {e.message}")
    return jsonify({"ok": False, "error": e.message}), e.status


def _view_request() -> ViewRequest:
    return decode(request.args)


def _int_arg(name, default):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"'{name}' must be an integer.")


# ---------- health / version ----------
@bp.route("/health")
def health():
    return jsonify({"ok": True})

@bp.route("/version")
def version():
    return jsonify({"name": "CanvasBabel", "link_params": [SECTOR, CANVAS, DATA], "api": 1})

# ---------- sectors ----------
@bp.route("/api/random-sector")
def api_random_sector():
    return jsonify({"sector": random_sector(CONFIG.sector_id_length)})

@bp.route("/api/sector/<sector>")
def api_sector(sector):
    ex = _explorer()
    offset = max(_int_arg("offset", 0), 0)
    limit = min(max(_int_arg("limit", CONFIG.canvases_per_sector), 0), CONFIG.canvases_per_sector)
    views = ex.load_sector(sector)
    page = views[offset:offset + limit]
    return jsonify({
        "sector": sector,
        "label": sector_label(sector),
        "total": len(views),
        "canvases": [v.to_dict(with_description=False) for v in page],
    })

# ---------- canvases ----------
@bp.route("/api/canvas")
def api_canvas():
    ex = _explorer()
    view = ex.open_request(_view_request())
    d = view.to_dict()
    d["bookmarked"] = ex.is_bookmarked()
    return jsonify(d)

@bp.route("/api/canvas.svg")
def api_canvas_svg():
    ex = _explorer()
    req = _view_request()
    ex.open_canvas(req.sector, req.index)
    name, mime, body = ex.download()
    return Response(body, mimetype=mime)

@bp.route("/api/download")
def api_download():
    ex = _explorer()
    req = _view_request()
    ex.open_canvas(req.sector, req.index, req.content)
    name, mime, body = ex.download()
    return Response(body, mimetype=mime,
                    headers={"Content-Disposition": f'attachment; filename="{name}"'})

@bp.route("/api/link")
def api_link():
    ex = _explorer()
    req = _view_request()
    ex.open_canvas(req.sector, req.index, req.content)
    return jsonify({"link": ex.share_link()})

# ---------- discovery ----------
@bp.route("/api/discover", methods=["POST"])
def api_discover():
    ex = _explorer()
    upload = request.files.get("file")
    if upload is not None:
        data, mimetype = upload.read(), upload.mimetype
    else:
        data, mimetype = request.get_data(), request.mimetype
    if mimetype in ("", "application/octet-stream", "multipart/form-data"):
        mimetype = None
    view = ex.upload(data, mimetype)
    return jsonify({
        "sector": view.sector,
        "canvas": view.index,
        "id": view.id,
        "link": ex.share_link(),
    })

# ---------- bookmarks ----------
@bp.route("/api/bookmarks", methods=["GET"])
def api_bookmarks():
    return jsonify([b.to_dict() for b in store.snapshot()])

@bp.route("/api/bookmarks", methods=["POST"])
def api_toggle_bookmark():
    ex = _explorer()
    body = request.get_json(force=True, silent=True) or {}
    params = {SECTOR: body.get(SECTOR), CANVAS: body.get(CANVAS)}
    if body.get(DATA) is not None:
        params[DATA] = body[DATA]
    req = decode(params)
    ex.open_canvas(req.sector, req.index, req.content)
    return jsonify({"bookmarked": ex.toggle_bookmark()})
