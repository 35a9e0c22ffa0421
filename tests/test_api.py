import io

import pytest

from canvas_babel.api import routes
from canvas_babel.app import app
from canvas_babel.kernel.link_codec import parse_link, ViewRequest

SECTOR = "a" * 1024


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(routes.store, "path", str(tmp_path / "bookmarks.json"))
    monkeypatch.setattr(routes.store, "bookmarks", [])
    app.testing = True
    with app.test_client() as client:
        yield client


def test_health_and_version(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json["ok"]

    r = client.get("/version")
    assert r.status_code == 200
    assert r.json["name"] == "CanvasBabel"


def test_random_sector(client):
    r = client.get("/api/random-sector")
    assert r.status_code == 200
    assert len(r.json["sector"]) == 1024


def test_sector_page(client):
    r = client.get(f"/api/sector/{SECTOR}?offset=10&limit=5")
    assert r.status_code == 200
    assert r.json["total"] == 1000
    assert [c["canvas"] for c in r.json["canvases"]] == [10, 11, 12, 13, 14]

    r = client.get(f"/api/sector/{'g' * 1024}")
    assert r.status_code == 400
    assert r.json["ok"] is False


def test_canvas_deep_link(client):
    r = client.get("/api/canvas", query_string={"sector": SECTOR, "canvas": "0"})
    assert r.status_code == 200
    assert r.json["seed"] == 5936232266146735
    assert r.json["description"]["primary_hue"] == 242
    assert r.json["isUploaded"] is False

    r = client.get("/api/canvas", query_string={"sector": SECTOR, "canvas": "nope"})
    assert r.status_code == 400


def test_canvas_svg(client):
    r = client.get("/api/canvas.svg", query_string={"sector": SECTOR, "canvas": "0"})
    assert r.status_code == 200
    assert r.mimetype == "image/svg+xml"
    assert b"feDisplacementMap" in r.data


def test_discover_upload_and_link(client, png_bytes):
    r1 = client.post("/api/discover", data={"file": (io.BytesIO(png_bytes), "a.png")},
                     content_type="multipart/form-data")
    assert r1.status_code == 200
    r2 = client.post("/api/discover", data=png_bytes, content_type="image/png")
    assert (r1.json["sector"], r1.json["canvas"]) == (r2.json["sector"], r2.json["canvas"])

    req = parse_link(r1.json["link"])
    assert (req.sector, req.index) == (r1.json["sector"], r1.json["canvas"])
    assert req.is_uploaded

    r = client.get("/api/canvas", query_string={"sector": req.sector, "canvas": req.index, "data": req.content})
    assert r.json["isUploaded"] is True
    assert r.json["data"] == req.content


def test_discover_rejects_non_image(client):
    r = client.post("/api/discover", data=b"hello", content_type="text/plain")
    assert r.status_code == 415
    assert r.json["ok"] is False


def test_link(client):
    r = client.get("/api/link", query_string={"sector": SECTOR, "canvas": "12"})
    assert r.status_code == 200
    assert parse_link(r.json["link"]) == ViewRequest(SECTOR, 12)


def test_bookmarks(client):
    r = client.post("/api/bookmarks", json={"sector": SECTOR, "canvas": 3})
    assert r.json["bookmarked"] is True
    r = client.get("/api/bookmarks")
    assert [b["canvasIndex"] for b in r.json] == [3]
    r = client.post("/api/bookmarks", json={"sector": SECTOR, "canvas": 3})
    assert r.json["bookmarked"] is False
    assert client.get("/api/bookmarks").json == []


def test_download(client):
    r = client.get("/api/download", query_string={"sector": SECTOR, "canvas": "1"})
    assert r.status_code == 200
    assert "attachment" in r.headers["Content-Disposition"]
    assert r.headers["Content-Disposition"].endswith('.svg"')


def test_concurrent_downloads_stay_separate(client):
    import sys
    import threading

    results = {"a": [], "b": []}

    def fetch(letter):
        with app.test_client() as c:
            for _ in range(100):
                r = c.get("/api/download", query_string={"sector": letter * 1024, "canvas": "0"})
                results[letter].append(r.headers["Content-Disposition"])

    old = sys.getswitchinterval()
    sys.setswitchinterval(1e-6)
    try:
        threads = [threading.Thread(target=fetch, args=(x,)) for x in "ab"]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
    finally:
        sys.setswitchinterval(old)

    for letter in "ab":
        assert len(results[letter]) == 100
        assert all(f"sector-{letter * 13}.svg" in h for h in results[letter])


def test_concurrent_bookmark_toggles(client):
    import threading

    def toggle(index):
        with app.test_client() as c:
            c.post("/api/bookmarks", json={"sector": SECTOR, "canvas": index})

    threads = [threading.Thread(target=toggle, args=(i,)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    saved = client.get("/api/bookmarks").json
    assert sorted(b["canvasIndex"] for b in saved) == list(range(20))


def test_discover_svg_download_roundtrip(client):
    svg = client.get("/api/canvas.svg", query_string={"sector": SECTOR, "canvas": "0"}).data
    r = client.post("/api/discover", data=svg, content_type="image/svg+xml")
    assert r.status_code == 200
    req = parse_link(r.json["link"])
    assert req.content.startswith("data:image/svg+xml;base64,")


def test_empty_data_param_rejected(client):
    r = client.get("/api/canvas", query_string={"sector": SECTOR, "canvas": "0", "data": ""})
    assert r.status_code == 400
