from __future__ import annotations

import logging
import re
from typing import Any

import httpx
from bs4 import BeautifulSoup
from cachetools import TTLCache

from omnilearn import config
from omnilearn.schemas import LessonImage

logger = logging.getLogger(__name__)

COMMONS_API = "https://commons.wikimedia.org/w/api.php"
USER_AGENT = "OmniLearn/0.3 (course image lookup; https://example.com)"

_EXTENSION = re.compile(r"\.(jpe?g|png|gif|svg|tiff?|webp)$", re.IGNORECASE)


def _meta(extmetadata: dict[str, Any], name: str) -> str:
    entry = extmetadata.get(name) or {}
    value = entry.get("value") if isinstance(entry, dict) else None
    if not isinstance(value, str) or not value.strip():
        return ""
    # Artist and similar fields are HTML fragments.
    return BeautifulSoup(value, "html.parser").get_text(" ", strip=True)


def _title_from_page(page_title: str) -> str:
    title = page_title.removeprefix("File:")
    return _EXTENSION.sub("", title).replace("_", " ").strip()


def _to_image(page: dict[str, Any]) -> LessonImage | None:
    infos = page.get("imageinfo") or []
    if not infos:
        return None
    info = infos[0]
    url = info.get("thumburl") or info.get("url")
    source = info.get("descriptionurl")
    if not url or not source:
        return None
    meta = info.get("extmetadata") or {}
    return LessonImage(
        url=url,
        title=_meta(meta, "ObjectName") or _title_from_page(page.get("title") or ""),
        author=_meta(meta, "Artist"),
        sourceUrl=source,
        license=_meta(meta, "LicenseShortName"),
    )


class WikimediaImageFinder:
    """
    Finds one freely licensed illustration per lesson on Wikimedia Commons.

    Lookups are memoised per (topic, lesson) for a while so that revisiting a
    lesson without an image does not hit Commons every time.
    """

    def __init__(
        self,
        *,
        ttl_seconds: int | None = None,
        maxsize: int = 1024,
        timeout: float = 15,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        ttl = config.image_cache_ttl() if ttl_seconds is None else ttl_seconds
        self._cache: TTLCache[tuple[str, str], LessonImage | None] = TTLCache(maxsize=maxsize, ttl=max(ttl, 1))
        self._timeout = timeout
        self._transport = transport

    async def find(self, topic: str, lesson: str) -> LessonImage | None:
        key = (topic, lesson)
        if key in self._cache:
            return self._cache[key]
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                headers={"User-Agent": USER_AGENT},
                transport=self._transport,
            ) as client:
                image = await self._search(client, f"{lesson} {topic}")
                if image is None:
                    image = await self._search(client, lesson)
        except (httpx.HTTPError, ValueError) as e:
            # Not cached: the next visit retries.
            logger.warning("Image lookup failed for %r: %s", lesson, e)
            return None
        self._cache[key] = image
        return image

    async def _search(self, client: httpx.AsyncClient, query: str) -> LessonImage | None:
        r = await client.get(
            COMMONS_API,
            params={
                "action": "query",
                "format": "json",
                "formatversion": "2",
                "generator": "search",
                "gsrsearch": f"{query} filetype:bitmap",
                "gsrnamespace": "6",
                "gsrlimit": "5",
                "prop": "imageinfo",
                "iiprop": "url|extmetadata",
                "iiurlwidth": "1024",
            },
        )
        r.raise_for_status()
        data = r.json()
        pages = (data.get("query") or {}).get("pages") or []
        for page in sorted(pages, key=lambda p: p.get("index", 0)):
            image = _to_image(page)
            if image is not None:
                return image
        return None
