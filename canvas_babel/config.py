"""
canvas_babel/config.py
Engine constants and runtime settings.

Engine constants define the address space itself: changing any of them
moves every canvas, so they are not read from the environment.
"""

import os
from dataclasses import dataclass

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


@dataclass(frozen=True)
class EngineConfig:
    canvases_per_sector: int = 1000
    # hexadecimal alphabet
    id_char_set: str = "abcdef0123456789"
    sector_id_length: int = 1024
    canvas_width: int = 200
    canvas_height: int = 200


CONFIG = EngineConfig()


class Settings:
    """Runtime settings, overridable through BABEL_* environment variables."""

    def __init__(self, environ=None):
        env = os.environ if environ is None else environ
        self.LOG_LEVEL = env.get("BABEL_LOG_LEVEL", "INFO")
        self.BOOKMARKS_PATH = env.get("BABEL_BOOKMARKS_PATH", os.path.join(ROOT, "bookmarks.json"))
        self.LINK_BASE = env.get("BABEL_LINK_BASE", "http://localhost:5000/")
        self.HOST = env.get("BABEL_HOST", "0.0.0.0")
        self.PORT = int(env.get("BABEL_PORT", "5000"))


settings = Settings()
