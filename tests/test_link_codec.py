import pytest

from canvas_babel.kernel.errors import ValidationError
from canvas_babel.kernel.link_codec import ViewRequest, build_link, decode, encode, parse_link
from canvas_babel.kernel.synthesizer import synthesize, synthesize_slot
from canvas_babel.kernel.addressing import canonical_key, derive_seed

SAMPLE = "data:image/png;base64,iVBORw0KGgo+/A=="


def test_procedural_link_has_no_data(sector_a):
    params = encode(sector_a, 7)
    assert params == {"sector": sector_a, "canvas": "7"}


def test_roundtrip(sector_a):
    assert decode(encode(sector_a, 7)) == ViewRequest(sector_a, 7, None)
    assert decode(encode(sector_a, 7, SAMPLE)) == ViewRequest(sector_a, 7, SAMPLE)
    assert decode(encode(sector_a, 7, SAMPLE)).is_uploaded


def test_procedural_decode_matches_direct_synthesis(sector_a):
    req = decode(encode(sector_a, 42))
    seed = derive_seed(canonical_key(req.sector, req.index))
    assert synthesize(seed) == synthesize_slot(sector_a, 42)


def test_url_roundtrip(sector_a):
    url = build_link("http://example.test/view?old=1", sector_a, 3, SAMPLE)
    assert url.startswith("http://example.test/view?sector=")
    assert "old=1" not in url
    assert parse_link(url) == ViewRequest(sector_a, 3, SAMPLE)
    assert parse_link(build_link("http://example.test/", sector_a, 0)) == ViewRequest(sector_a, 0)


@pytest.mark.parametrize("params", [
    {},
    {"sector": "a" * 1024},
    {"canvas": "1"},
    {"sector": "a" * 1024, "canvas": "x"},
    {"sector": "a" * 1023, "canvas": "1"},
    {"sector": "g" * 1024, "canvas": "1"},
])
def test_decode_rejects(params):
    with pytest.raises(ValidationError):
        decode(params)


def test_empty_data_is_not_procedural(sector_a):
    with pytest.raises(ValidationError):
        decode(encode(sector_a, 7, ""))
