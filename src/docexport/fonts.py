"""
Font resource loading for structured PDF reports.

The structured renderer embeds a TrueType family that is downloaded at
runtime. :class:`FontRegistry` fetches every configured weight once,
keeps the binaries base64-encoded in memory keyed by source URL, and
registers the family with ReportLab.

Registration is single-flight: concurrent callers of
:meth:`FontRegistry.ensure_registered` share one in-flight task, so each
weight is fetched at most once no matter how many exports start at the same
time. A failed attempt is not remembered; the next call fetches again.

Classes
-------
FontSource
    URL, weight and style of one font file.
FontRegistry
    Per-process cache and registration state of the report font family.

Functions
---------
fetch_font_bytes(url, timeout=None)
    Default fetcher downloading a font binary with ``httpx``.
load_font_sources()
    Font sources declared in ``config/fonts.json``.
get_default_registry()
    Lazily created registry shared by exports that do not pass their own.

Examples
--------
>>> import asyncio
>>> from docexport.fonts import FontRegistry
>>> registry = FontRegistry()
>>> asyncio.run(registry.ensure_registered())
>>> registry.regular_font
'NotoSans-Regular'
"""

import asyncio
import base64
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Awaitable, Callable, Iterable

import httpx
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from ._utils import read_config
from .errors import ResourceLoadError
from .types import CachedFontAsset

logger = logging.getLogger(__name__)

FontFetcher = Callable[[str], Awaitable[bytes]]


@dataclass(frozen=True)
class FontSource:
    """One downloadable font file of the report family."""

    url: str
    weight: int
    style: str = "regular"


def load_font_sources() -> tuple[FontSource, ...]:
    """Return the font sources declared in ``config/fonts.json``."""
    return tuple(FontSource(**source) for source in read_config("fonts")["sources"])


async def fetch_font_bytes(url: str, timeout: float | None = None) -> bytes:
    """
    Download a font binary.

    Parameters
    ----------
    url : str
        Source URL of the font file.
    timeout : float, optional
        Timeout in seconds. Defaults to ``timeout_sec`` from
        ``config/fonts.json``.

    Returns
    -------
    bytes
        Raw font file content.

    Raises
    ------
    ResourceLoadError
        If the request fails or the response status is not successful.
    """
    if timeout is None:
        timeout = read_config("fonts")["timeout_sec"]
    err_msg = read_config("messages")["errors"]["font_fetch_failed_f"]
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            response = await client.get(url)
    except httpx.HTTPError as e:
        raise ResourceLoadError(err_msg.format(url, type(e).__name__)) from e
    if not response.is_success:
        raise ResourceLoadError(err_msg.format(url, response.status_code))
    logger.debug("Fetched %d bytes from %s", len(response.content), url)
    return response.content


class FontRegistry:
    """
    Cache and registration state of the report font family.

    Parameters
    ----------
    sources : Iterable[FontSource], optional
        Font files making up the family. Defaults to
        :func:`load_font_sources`.
    family : str, optional
        Family name registered with ReportLab. Defaults to ``family`` from
        ``config/fonts.json``.
    fetcher : callable, optional
        Coroutine function ``fetcher(url) -> bytes``. Defaults to
        :func:`fetch_font_bytes`.

    Attributes
    ----------
    registered : bool
        Whether the family is registered and ready for rendering.

    Notes
    -----
    - The cache is keyed by source URL and only ever written by the
      registry itself. Individual weights fetched successfully stay cached
      even when another weight of the same attempt fails.
    - Every caller awaits the shared task through ``asyncio.shield``, so
      cancelling one export does not cancel registration for the others.
    """

    def __init__(
        self,
        sources: Iterable[FontSource] | None = None,
        family: str | None = None,
        fetcher: FontFetcher | None = None,
    ):
        self.sources = tuple(sources) if sources is not None else load_font_sources()
        self.family = family or read_config("fonts")["family"]
        self._fetcher = fetcher or fetch_font_bytes
        self._cache: dict[str, CachedFontAsset] = {}
        self._registered = False
        self._pending: asyncio.Future | None = None

    @property
    def registered(self) -> bool:
        return self._registered

    def font_name(self, style: str) -> str:
        """ReportLab font name of a style, e.g. ``NotoSans-Bold``."""
        return f"{self.family}-{style.capitalize()}"

    @property
    def regular_font(self) -> str:
        return self.font_name(self._style_for(400))

    @property
    def medium_font(self) -> str:
        return self.font_name(self._style_for(500))

    @property
    def bold_font(self) -> str:
        return self.font_name(self._style_for(700))

    def _style_for(self, weight: int) -> str:
        # closest configured weight
        source = min(self.sources, key=lambda s: abs(s.weight - weight))
        return source.style

    def cached_asset(self, url: str) -> CachedFontAsset | None:
        return self._cache.get(url)

    async def ensure_registered(self) -> None:
        """
        Make sure the font family is fetched and registered.

        Returns immediately once registered. While a registration is in
        flight every caller awaits the same task.

        Raises
        ------
        ResourceLoadError
            If fetching, decoding or registering any font fails. The
            registry is left unregistered and the next call retries.
        """
        if self._registered:
            return
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._register())
        await asyncio.shield(self._pending)

    async def _register(self) -> None:
        try:
            assets = await asyncio.gather(
                *(self._load(source) for source in self.sources)
            )
            self._register_family(assets)
            self._registered = True
            logger.info(
                "Registered font family '%s' (%d weights)", self.family, len(assets)
            )
        except ResourceLoadError as e:
            self._registered = False
            logger.error("Font registration for '%s' failed: %s", self.family, e)
            raise
        except Exception as e:
            self._registered = False
            logger.error("Font registration for '%s' failed: %s", self.family, e)
            raise ResourceLoadError(
                read_config("messages")["errors"]["font_registration_failed_f"].format(
                    self.family, e
                )
            ) from e
        finally:
            self._pending = None

    async def _load(self, source: FontSource) -> CachedFontAsset:
        cached = self._cache.get(source.url)
        if cached is not None:
            logger.debug("Using cached font %s", source.url)
            return cached
        raw = await self._fetcher(source.url)
        asset = CachedFontAsset(
            source_url=source.url,
            weight=source.weight,
            embedded_data=base64.b64encode(raw).decode("ascii"),
        )
        self._cache[source.url] = asset
        return asset

    def _register_family(self, assets: list[CachedFontAsset]) -> None:
        for source, asset in zip(self.sources, assets):
            font_file = BytesIO(base64.b64decode(asset.embedded_data))
            pdfmetrics.registerFont(TTFont(self.font_name(source.style), font_file))
        pdfmetrics.registerFontFamily(
            self.family,
            normal=self.regular_font,
            bold=self.bold_font,
            italic=self.regular_font,
            boldItalic=self.bold_font,
        )


_default_registry: FontRegistry | None = None


def get_default_registry() -> FontRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry  # pylint: disable=global-statement
    if _default_registry is None:
        _default_registry = FontRegistry()
    return _default_registry
