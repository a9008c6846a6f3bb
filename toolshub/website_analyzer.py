"""Remote page inspection: redirect chain, final response, HTML metadata, security headers."""
import asyncio
import logging
import time
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin, urlparse

import aiohttp
from bs4 import BeautifulSoup

from .config import HTTP_TIMEOUT, MAX_REDIRECTS
from .errors import InvalidInputError

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = (300, 301, 302, 303, 307, 308)
MAX_BODY_BYTES = 2 * 1024 * 1024
READ_CHUNK_BYTES = 64 * 1024

REQUEST_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (compatible; ToolsHub Website Analyzer)',
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
}

SECURITY_HEADERS = (
    'strict-transport-security',
    'content-security-policy',
    'x-frame-options',
    'x-content-type-options',
    'x-xss-protection',
    'referrer-policy',
    'permissions-policy',
    'expect-ct',
    'feature-policy',
)
SCORED_HEADERS = SECURITY_HEADERS[:5]

# (substring, technology, group); all matches are reported
SERVER_HINTS = (
    ('apache', 'Apache', 'servers'),
    ('nginx', 'Nginx', 'servers'),
    ('iis', 'Microsoft IIS', 'servers'),
    ('microsoft', 'Microsoft IIS', 'servers'),
    ('cloudflare', 'Cloudflare', 'servers'),
)
POWERED_BY_HINTS = (
    ('php', 'PHP', 'languages'),
    ('asp.net', 'ASP.NET', 'languages'),
    ('express', 'Express.js', 'frameworks'),
    ('next.js', 'Next.js', 'frameworks'),
)
SCRIPT_HINTS = (
    ('jquery', 'jQuery', 'libraries'),
    ('react', 'React', 'libraries'),
    ('vue', 'Vue.js', 'libraries'),
    ('angular', 'Angular', 'libraries'),
    ('bootstrap', 'Bootstrap', 'frameworks'),
)
STYLESHEET_HINTS = (
    ('bootstrap', 'Bootstrap', 'frameworks'),
    ('tailwind', 'Tailwind CSS', 'frameworks'),
    ('font-awesome', 'Font Awesome', 'libraries'),
)
GENERATOR_HINTS = (
    ('wordpress', 'WordPress', 'cms'),
    ('drupal', 'Drupal', 'cms'),
    ('joomla', 'Joomla', 'cms'),
)


def validate_url(url: str) -> str:
    url = (url or '').strip()
    if not url:
        raise InvalidInputError('URL is required')
    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise InvalidInputError('Invalid URL format')
    return url


def _headers(response: aiohttp.ClientResponse) -> Dict[str, str]:
    return {name.lower(): value for name, value in response.headers.items()}


def _origin(url: str) -> tuple:
    parsed = urlparse(url)
    return parsed.scheme, parsed.netloc.lower()


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class WebsiteAnalyzer:
    """Sequential validate, trace, fetch, parse and summarize pipeline. Stateless per call."""

    def __init__(self, timeout: float = HTTP_TIMEOUT, max_redirects: int = MAX_REDIRECTS):
        self.timeout = timeout
        self.max_redirects = max_redirects

    def _session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers=REQUEST_HEADERS,
        )

    async def analyze(self, url: str) -> Dict[str, Any]:
        url = validate_url(url)
        started = time.monotonic()

        async with self._session() as session:
            redirects = await self.trace_redirects(session, url)
            final_url = redirects[-1]['to'] if redirects else url

            error = None
            final_response = None
            html_analysis: Dict[str, Any] = {}
            headers: Dict[str, str] = {}
            try:
                final_response, body = await self.fetch_final(session, final_url)
                headers = final_response['headers']
                if 'html' in (final_response['contentType'] or '').lower():
                    html_analysis = self.analyze_html(body, final_url)
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                logger.info('[ANALYZER] Fetching %s failed: %s', final_url, e)
                error = str(e) or type(e).__name__

        return {
            'originalUrl': url,
            'finalUrl': final_url,
            'responseTime': _elapsed_ms(started),
            'redirects': redirects,
            'finalResponse': final_response,
            'htmlAnalysis': html_analysis,
            'security': self.extract_security_info(headers) if final_response else {},
            'technologies': self.detect_technologies(headers, html_analysis),
            'error': error,
        }

    async def trace_redirects(self, session: aiohttp.ClientSession, url: str) -> List[Dict[str, Any]]:
        """Follow redirects one HEAD request at a time.

        Only redirect hops are recorded. A network error or the hop limit ends
        the chain quietly with the hops collected so far.
        """
        redirects: List[Dict[str, Any]] = []
        current_url = url

        while len(redirects) < self.max_redirects:
            try:
                async with session.head(current_url, allow_redirects=False) as response:
                    status = response.status
                    headers = _headers(response)
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                logger.info('[ANALYZER] Redirect trace stopped at %s: %s', current_url, e)
                break

            location = headers.get('location')
            if status not in REDIRECT_STATUSES or not location:
                break

            next_url = urljoin(current_url, location)
            redirects.append({
                'from': current_url,
                'to': next_url,
                'statusCode': status,
                'headers': headers,
            })
            current_url = next_url

        return redirects

    async def fetch_final(self, session: aiohttp.ClientSession, url: str) -> tuple:
        """GET ``url`` without following redirects; returns (summary, body bytes).

        The body is read to the end of the stream, keeping at most ``MAX_BODY_BYTES``.
        """
        async with session.get(url, allow_redirects=False) as response:
            body = await self._read_body(response)
            headers = _headers(response)
            summary = {
                'statusCode': response.status,
                'statusText': response.reason,
                'headers': headers,
                'size': int(headers['content-length']) if headers.get('content-length', '').isdigit() else len(body),
                'contentType': headers.get('content-type'),
            }
        return summary, body

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> bytes:
        chunks: List[bytes] = []
        received = 0
        async for chunk in response.content.iter_chunked(READ_CHUNK_BYTES):
            chunks.append(chunk)
            received += len(chunk)
            if received >= MAX_BODY_BYTES:
                break
        return b''.join(chunks)[:MAX_BODY_BYTES]

    def analyze_html(self, html: bytes, page_url: str) -> Dict[str, Any]:
        soup = BeautifulSoup(html, 'html.parser')

        title_tag = soup.find('title')
        meta_tags = self.extract_meta_tags(soup)

        page_origin = _origin(page_url)
        links = {'internal': 0, 'external': 0, 'total': 0}
        for anchor in soup.find_all('a', href=True):
            href = anchor['href'].strip()
            if not href:
                continue
            links['total'] += 1
            if _origin(urljoin(page_url, href)) == page_origin:
                links['internal'] += 1
            else:
                links['external'] += 1

        images = {'total': 0, 'withAlt': 0, 'withoutAlt': 0}
        for image in soup.find_all('img'):
            images['total'] += 1
            if (image.get('alt') or '').strip():
                images['withAlt'] += 1
            else:
                images['withoutAlt'] += 1

        stylesheets = [
            link['href'] for link in soup.find_all('link', href=True)
            if 'stylesheet' in [rel.lower() for rel in link.get('rel') or []]
        ]

        return {
            'title': title_tag.get_text().strip() if title_tag else '',
            'description': meta_tags.get('description') or meta_tags.get('og:description') or '',
            'keywords': meta_tags.get('keywords', ''),
            'headings': {f'h{level}': len(soup.find_all(f'h{level}')) for level in range(1, 7)},
            'links': links,
            'images': images,
            'scripts': [script['src'] for script in soup.find_all('script', src=True)],
            'stylesheets': stylesheets,
            'metaTags': meta_tags,
        }

    @staticmethod
    def extract_meta_tags(soup: BeautifulSoup) -> Dict[str, str]:
        meta_tags = {}
        for meta in soup.find_all('meta'):
            name = meta.get('name') or meta.get('property') or meta.get('http-equiv')
            content = meta.get('content')
            if name and content:
                meta_tags[name.lower()] = content
        return meta_tags

    @staticmethod
    def extract_security_info(headers: Dict[str, str]) -> Dict[str, Any]:
        present = {name: headers[name] for name in SECURITY_HEADERS if name in headers}
        scored = sum(1 for name in SCORED_HEADERS if name in present)
        return {
            'securityHeaders': present,
            'isSecureConnection': 'strict-transport-security' in present,
            'hasCSP': 'content-security-policy' in present,
            'hasXFrameOptions': 'x-frame-options' in present,
            'hasXContentTypeOptions': 'x-content-type-options' in present,
            'hasXXSSProtection': 'x-xss-protection' in present,
            'securityScore': round(scored / len(SCORED_HEADERS) * 100),
        }

    @staticmethod
    def detect_technologies(headers: Dict[str, str], html_analysis: Dict[str, Any]) -> Dict[str, List[str]]:
        """Best-effort guesses from headers and asset URLs, not authoritative."""
        technologies: Dict[str, List[str]] = {
            'frameworks': [], 'libraries': [], 'cms': [], 'servers': [], 'languages': [],
        }

        def match(value: Optional[str], hints: tuple) -> None:
            lowered = (value or '').lower()
            for fragment, name, group in hints:
                if fragment in lowered and name not in technologies[group]:
                    technologies[group].append(name)

        match(headers.get('server'), SERVER_HINTS)
        match(headers.get('x-powered-by') or headers.get('x-generator'), POWERED_BY_HINTS)
        for script in html_analysis.get('scripts', []):
            match(script, SCRIPT_HINTS)
        for stylesheet in html_analysis.get('stylesheets', []):
            match(stylesheet, STYLESHEET_HINTS)
        match(html_analysis.get('metaTags', {}).get('generator'), GENERATOR_HINTS)

        return technologies

    async def quick_check(self, url: str) -> Dict[str, Any]:
        """One HEAD request without following redirects; network failures are reported, not raised."""
        url = validate_url(url)
        started = time.monotonic()
        try:
            async with self._session() as session:
                async with session.head(url, allow_redirects=False) as response:
                    return {
                        'url': url,
                        'statusCode': response.status,
                        'headers': _headers(response),
                        'responseTime': _elapsed_ms(started),
                    }
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.info('[ANALYZER] Quick check of %s failed: %s', url, e)
            return {
                'url': url,
                'statusCode': None,
                'headers': {},
                'responseTime': _elapsed_ms(started),
                'error': str(e) or 'No response received',
            }
