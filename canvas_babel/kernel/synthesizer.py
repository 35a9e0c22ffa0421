from dataclasses import dataclass, asdict
import math

from canvas_babel.config import CONFIG
from .addressing import canonical_key, derive_seed
from .seeded_random import make_stream

FRACTAL_NOISE = "fractalNoise"
TURBULENCE = "turbulence"

PREFIX = "canvas://"


def _num(x) -> str:
    # JS-style number text: 240.0 -> "240"
    s = repr(float(x))
    return s[:-2] if s.endswith(".0") else s


@dataclass(frozen=True)
class ImageDescription:
    """
    Deterministic parameters of one procedural canvas.
    canvas://{seed}:{primary_hue}:{secondary_hue}:{distortion}:{base_frequency}:{octaves}:{scale}
    """
    seed: int
    primary_hue: int
    secondary_hue: float
    distortion: str
    base_frequency: float
    octaves: int
    scale: int
    width: int = CONFIG.canvas_width
    height: int = CONFIG.canvas_height

    @property
    def background(self) -> str:
        return f"hsl({self.primary_hue}, 70%, 10%)"

    @property
    def foreground(self) -> str:
        return f"hsl({_num(self.secondary_hue)}, 80%, 60%)"

    @property
    def blend_mode(self) -> str:
        return "screen"

    @property
    def filter_id(self) -> str:
        return f"filter-{self.seed}"

    def descriptor(self) -> str:
        return (
            f"{PREFIX}{self.seed}:{self.primary_hue}:{_num(self.secondary_hue)}:"
            f"{self.distortion}:{self.base_frequency:.4f}:{self.octaves}:{self.scale}"
        )

    @staticmethod
    def from_descriptor(desc: str) -> "ImageDescription":
        parts = desc[len(PREFIX):].split(":")
        return ImageDescription(
            seed=int(parts[0]),
            primary_hue=int(parts[1]),
            secondary_hue=float(parts[2]),
            distortion=parts[3],
            base_frequency=float(parts[4]),
            octaves=int(parts[5]),
            scale=int(parts[6]),
        )

    def to_dict(self) -> dict:
        d = asdict(self)
        d.update(background=self.background, foreground=self.foreground,
                 blend_mode=self.blend_mode, descriptor=self.descriptor())
        return d


def synthesize(seed: int) -> ImageDescription:
    # draw order is part of the address space; do not reorder
    random = make_stream(seed)
    hue1 = math.floor(random() * 360)
    hue2 = (hue1 + 120 + random() * 120) % 360
    distortion = FRACTAL_NOISE if random() > 0.5 else TURBULENCE
    base_frequency = float(f"{0.01 + random() * 0.05:.4f}")
    octaves = 2 + math.floor(random() * 4)
    scale = 10 + math.floor(random() * 40)
    return ImageDescription(
        seed=seed,
        primary_hue=hue1,
        secondary_hue=hue2,
        distortion=distortion,
        base_frequency=base_frequency,
        octaves=octaves,
        scale=scale,
    )


def synthesize_slot(sector: str, index: int) -> ImageDescription:
    return synthesize(derive_seed(canonical_key(sector, index)))
