"""
SVG rendering of an ImageDescription (download / thumbnail output).
"""
import svgwrite

from .synthesizer import ImageDescription


def render_svg(desc: ImageDescription) -> str:
    w, h = desc.width, desc.height
    # debug=False: svgwrite's validator rejects hsl() colors
    dwg = svgwrite.Drawing(size=(w, h), viewBox=f"0 0 {w} {h}", debug=False)

    flt = dwg.defs.add(dwg.filter(id=desc.filter_id))
    flt.feTurbulence(
        type=desc.distortion,
        baseFrequency=f"{desc.base_frequency:.4f}",
        numOctaves=desc.octaves,
        result="noise",
    )
    flt.feDisplacementMap(in_="SourceGraphic", in2="noise", scale=desc.scale)

    dwg.add(dwg.rect(insert=(0, 0), size=("100%", "100%"), fill=desc.background))
    dwg.add(dwg.rect(
        insert=(0, 0),
        size=("100%", "100%"),
        fill=desc.foreground,
        filter=f"url(#{desc.filter_id})",
        style=f"mix-blend-mode: {desc.blend_mode};",
    ))
    return dwg.tostring()


def download_name(key: str, uploaded: bool = False) -> str:
    if uploaded:
        return f"found-{key[:20]}.png"
    return f"{key[:20]}.svg"
