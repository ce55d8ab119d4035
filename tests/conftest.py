import asyncio
from collections import Counter
from io import BytesIO
from pathlib import Path

import pytest
import reportlab
from PIL import Image

from docexport.errors import ResourceLoadError
from docexport.fonts import FontRegistry, FontSource
from docexport.types import RasterImage

VERA_DIR = Path(reportlab.__file__).parent / "fonts"

TEST_SOURCES = (
    FontSource("https://fonts.test/TestSans-Regular.ttf", 400, "regular"),
    FontSource("https://fonts.test/TestSans-Medium.ttf", 500, "medium"),
    FontSource("https://fonts.test/TestSans-Bold.ttf", 700, "bold"),
)


class CountingFetcher:
    """Font fetcher serving the Vera fonts bundled with ReportLab."""

    def __init__(self, fail_urls=()):
        self.calls = Counter()
        self.fail_urls = set(fail_urls)

    async def __call__(self, url):
        self.calls[url] += 1
        # give concurrent callers a chance to interleave
        await asyncio.sleep(0)
        if url in self.fail_urls:
            raise ResourceLoadError(f"Failed to load font from {url} (503).")
        name = "VeraBd.ttf" if "Bold" in url else "Vera.ttf"
        return (VERA_DIR / name).read_bytes()


class FakeCapturer:
    """Capturer returning a solid PNG of a fixed pixel size."""

    def __init__(self, width=100, height=100):
        self.width = width
        self.height = height
        self.calls = []

    async def capture(self, node, scale=2, background_color="#ffffff"):
        self.calls.append((node, scale, background_color))
        buffer = BytesIO()
        Image.new("RGB", (self.width, self.height), (30, 60, 90)).save(
            buffer, format="PNG"
        )
        return RasterImage(self.width, self.height, buffer.getvalue())


@pytest.fixture
def font_sources():
    return TEST_SOURCES


@pytest.fixture
def fetcher():
    if not (VERA_DIR / "Vera.ttf").exists() or not (VERA_DIR / "VeraBd.ttf").exists():
        pytest.skip("ReportLab bundled Vera fonts are not available")
    return CountingFetcher()


@pytest.fixture
def font_registry(fetcher):
    return FontRegistry(sources=TEST_SOURCES, family="TestSans", fetcher=fetcher)


@pytest.fixture
def make_capturer():
    return FakeCapturer


@pytest.fixture
def fake_capturer():
    return FakeCapturer()
