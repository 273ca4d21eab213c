"""Wikimedia Commons image lookup against a mocked transport."""

import httpx
import pytest

from omnilearn.images import WikimediaImageFinder

PAGE = {
    "pageid": 1,
    "title": "File:Animal_cell_structure.png",
    "index": 1,
    "imageinfo": [
        {
            "url": "https://upload.wikimedia.org/full.png",
            "thumburl": "https://upload.wikimedia.org/thumb.png",
            "descriptionurl": "https://commons.wikimedia.org/wiki/File:Animal_cell_structure.png",
            "extmetadata": {
                "Artist": {"value": '<a href="//commons.wikimedia.org/wiki/User:Someone">Some One</a>'},
                "LicenseShortName": {"value": "CC BY-SA 3.0"},
            },
        }
    ],
}


def _finder(handler) -> WikimediaImageFinder:
    return WikimediaImageFinder(ttl_seconds=60, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_first_result_mapped():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"query": {"pages": [PAGE]}})

    image = await _finder(handler).find("Biology", "Animal cell")
    assert image.url == "https://upload.wikimedia.org/thumb.png"
    assert image.sourceUrl.endswith("Animal_cell_structure.png")
    assert image.title == "Animal cell structure"
    assert image.author == "Some One"
    assert image.license == "CC BY-SA 3.0"
    assert seen[0].url.params["gsrsearch"] == "Animal cell Biology filetype:bitmap"


@pytest.mark.asyncio
async def test_falls_back_to_lesson_only_query():
    queries = []

    def handler(request):
        queries.append(request.url.params["gsrsearch"])
        if len(queries) == 1:
            return httpx.Response(200, json={"batchcomplete": True})
        return httpx.Response(200, json={"query": {"pages": [PAGE]}})

    image = await _finder(handler).find("Biology", "Animal cell")
    assert image is not None
    assert queries == ["Animal cell Biology filetype:bitmap", "Animal cell filetype:bitmap"]


@pytest.mark.asyncio
async def test_no_results_cached():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    finder = _finder(handler)
    assert await finder.find("Biology", "Nothing") is None
    assert await finder.find("Biology", "Nothing") is None
    assert len(calls) == 2  # both queries once, then served from cache


@pytest.mark.asyncio
async def test_http_error_is_no_image_and_not_cached():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503)

    finder = _finder(handler)
    assert await finder.find("Biology", "Cells") is None
    assert await finder.find("Biology", "Cells") is None
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_pages_without_source_skipped():
    broken = {"title": "File:x.png", "index": 0, "imageinfo": [{"url": "https://u/x.png"}]}

    def handler(request):
        return httpx.Response(200, json={"query": {"pages": [broken, PAGE]}})

    image = await _finder(handler).find("Biology", "Cells")
    assert image.sourceUrl == PAGE["imageinfo"][0]["descriptionurl"]
