import asyncio
from contextlib import asynccontextmanager

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer, unused_port

from toolshub import website_analyzer
from toolshub.errors import InvalidInputError
from toolshub.website_analyzer import WebsiteAnalyzer

pytestmark = pytest.mark.anyio

PAGE = """<!DOCTYPE html>
<html>
<head>
  <title> Example Shop </title>
  <meta name="description" content="Things for sale">
  <meta name="Keywords" content="shop, things">
  <meta name="generator" content="WordPress 6.4">
  <link rel="stylesheet" href="/css/bootstrap.min.css">
  <script src="https://cdn.example.net/jquery-3.7.min.js"></script>
</head>
<body>
  <h1>Welcome</h1>
  <h2>New</h2>
  <h2>Popular</h2>
  <a href="/about">About</a>
  <a href="#top">Top</a>
  <a href="https://elsewhere.example.org/">Partner</a>
  <img src="/a.png" alt="A product">
  <img src="/b.png">
</body>
</html>
"""


async def start(request):
    return web.Response(status=301, headers={"Location": "/final"})


async def final(request):
    return web.Response(
        text=PAGE,
        content_type="text/html",
        headers={
            "Strict-Transport-Security": "max-age=31536000",
            "X-Frame-Options": "DENY",
        },
    )


STREAMED_PARTS = (
    b"<html><head><title>Streamed</title></head><body><h1>one</h1>",
    b"<h2>two</h2><a href='https://other.example/'>out</a></body></html>",
)


async def streamed(request):
    response = web.StreamResponse(headers={"Content-Type": "text/html"})
    await response.prepare(request)
    for part in STREAMED_PARTS:
        await response.write(part)
        await asyncio.sleep(0.2)
    await response.write_eof()
    return response


async def loop(request):
    step = int(request.match_info["step"])
    return web.Response(status=302, headers={"Location": f"/loop/{step + 1}"})


@asynccontextmanager
async def serve_site():
    app = web.Application()
    app.router.add_get("/start", start)
    app.router.add_get("/final", final)
    app.router.add_get("/loop/{step}", loop)
    app.router.add_get("/streamed", streamed, allow_head=False)
    async with TestServer(app) as server:
        yield server


async def test_analyze_follows_redirect_and_inspects_page():
    async with serve_site() as server:
        start_url = str(server.make_url("/start"))
        final_url = str(server.make_url("/final"))
        result = await WebsiteAnalyzer(timeout=5).analyze(start_url)

    assert result["originalUrl"] == start_url
    assert result["finalUrl"] == final_url
    assert result["error"] is None
    assert len(result["redirects"]) == 1
    hop = result["redirects"][0]
    assert hop["from"] == start_url
    assert hop["to"] == final_url
    assert hop["statusCode"] == 301

    assert result["finalResponse"]["statusCode"] == 200
    assert result["finalResponse"]["contentType"].startswith("text/html")
    assert result["finalResponse"]["size"] > 0

    html = result["htmlAnalysis"]
    assert html["title"] == "Example Shop"
    assert html["description"] == "Things for sale"
    assert html["keywords"] == "shop, things"
    assert html["headings"]["h1"] == 1
    assert html["headings"]["h2"] == 2
    assert html["headings"]["h3"] == 0
    assert html["links"] == {"internal": 2, "external": 1, "total": 3}
    assert html["images"] == {"total": 2, "withAlt": 1, "withoutAlt": 1}

    security = result["security"]
    assert security["isSecureConnection"]
    assert security["hasXFrameOptions"]
    assert not security["hasCSP"]
    assert security["securityScore"] == 40

    technologies = result["technologies"]
    assert technologies["cms"] == ["WordPress"]
    assert technologies["libraries"] == ["jQuery"]
    assert technologies["frameworks"] == ["Bootstrap"]


async def test_redirect_chain_is_bounded():
    async with serve_site() as server:
        result = await WebsiteAnalyzer(timeout=5, max_redirects=3).analyze(str(server.make_url("/loop/0")))
        last_url = str(server.make_url("/loop/3"))

    assert len(result["redirects"]) == 3
    assert result["finalUrl"] == last_url
    assert result["finalResponse"]["statusCode"] == 302
    assert result["htmlAnalysis"] == {}


async def test_page_without_redirects():
    async with serve_site() as server:
        url = str(server.make_url("/final"))
        result = await WebsiteAnalyzer(timeout=5).analyze(url)

    assert result["redirects"] == []
    assert result["finalUrl"] == url


async def test_unreachable_host_returns_partial_result():
    url = f"http://127.0.0.1:{unused_port()}/"
    result = await WebsiteAnalyzer(timeout=5).analyze(url)

    assert result["redirects"] == []
    assert result["finalUrl"] == url
    assert result["finalResponse"] is None
    assert result["error"]
    assert result["security"] == {}


@pytest.mark.parametrize("url", ["", "not a url", "ftp://example.com/file"])
async def test_invalid_url_is_rejected(url):
    with pytest.raises(InvalidInputError):
        await WebsiteAnalyzer().analyze(url)


async def test_quick_check():
    async with serve_site() as server:
        result = await WebsiteAnalyzer(timeout=5).quick_check(str(server.make_url("/start")))

    assert result["statusCode"] == 301
    assert result["headers"]["location"] == "/final"
    assert "error" not in result


async def test_quick_check_reports_network_errors():
    result = await WebsiteAnalyzer(timeout=5).quick_check(f"http://127.0.0.1:{unused_port()}/")
    assert result["statusCode"] is None
    assert result["error"]


async def test_links_are_classified_by_origin():
    html = b"""<a href="/a">a</a><a href="https://example.com/b">b</a>
    <a href="http://example.com/c">c</a><a href="https://cdn.example.com/d">d</a><a href="">e</a>"""
    analysis = WebsiteAnalyzer().analyze_html(html, "https://example.com/page")
    assert analysis["links"] == {"internal": 2, "external": 2, "total": 4}
    assert analysis["title"] == ""


async def test_security_score():
    all_headers = {
        "strict-transport-security": "max-age=1",
        "content-security-policy": "default-src 'self'",
        "x-frame-options": "DENY",
        "x-content-type-options": "nosniff",
        "x-xss-protection": "1",
        "referrer-policy": "no-referrer",
    }
    assert WebsiteAnalyzer.extract_security_info(all_headers)["securityScore"] == 100
    assert WebsiteAnalyzer.extract_security_info({"referrer-policy": "no-referrer"})["securityScore"] == 0
    assert WebsiteAnalyzer.extract_security_info({})["securityHeaders"] == {}


async def test_technologies_from_headers():
    technologies = WebsiteAnalyzer.detect_technologies({"server": "nginx/1.25", "x-powered-by": "PHP/8.2"}, {})
    assert technologies["servers"] == ["Nginx"]
    assert technologies["languages"] == ["PHP"]


async def test_streamed_page_is_read_to_the_end():
    async with serve_site() as server:
        result = await WebsiteAnalyzer(timeout=5).analyze(str(server.make_url("/streamed")))

    assert result["error"] is None
    assert result["finalResponse"]["size"] == sum(len(part) for part in STREAMED_PARTS)
    html = result["htmlAnalysis"]
    assert html["title"] == "Streamed"
    assert html["headings"]["h1"] == 1
    assert html["headings"]["h2"] == 1
    assert html["links"] == {"internal": 0, "external": 1, "total": 1}


async def test_body_is_capped(monkeypatch):
    monkeypatch.setattr(website_analyzer, "MAX_BODY_BYTES", 10)
    monkeypatch.setattr(website_analyzer, "READ_CHUNK_BYTES", 4)

    async with serve_site() as server:
        async with aiohttp.ClientSession() as session:
            _, body = await WebsiteAnalyzer().fetch_final(session, str(server.make_url("/streamed")))

    assert body == STREAMED_PARTS[0][:10]
