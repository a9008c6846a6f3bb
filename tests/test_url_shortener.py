import re
from datetime import datetime, timedelta, timezone

import pytest

from toolshub import url_shortener
from toolshub.errors import CapacityError, ConflictError, InvalidInputError, NotFoundError

pytestmark = pytest.mark.anyio

BASE_URL = "http://localhost:3000"


async def test_shorten_creates_record(db):
    record = await url_shortener.shorten(db, "https://example.com/a/b?c=1", BASE_URL)

    assert re.fullmatch(r"[A-Za-z0-9]{6}", record["shortCode"])
    assert record["shortUrl"] == f"{BASE_URL}/s/{record['shortCode']}"
    assert record["clicks"] == 0
    assert record["longUrl"] == "https://example.com/a/b?c=1"
    assert record["createdBy"] == "anonymous"


async def test_resolve_counts_each_click(db):
    record = await url_shortener.shorten(db, "https://example.com/page", BASE_URL + "/")
    assert record["shortUrl"] == f"{BASE_URL}/s/{record['shortCode']}"

    for clicks in range(1, 4):
        assert await url_shortener.resolve(db, record["shortCode"]) == "https://example.com/page"
        stats = await url_shortener.get_stats(db, record["shortCode"])
        assert stats["clicks"] == clicks


async def test_resolve_unknown_code(db):
    with pytest.raises(NotFoundError):
        await url_shortener.resolve(db, "nope42")


@pytest.mark.parametrize("long_url", ["", "   ", "not a url", "ftp://x", "http://", "example.com"])
async def test_invalid_urls_are_rejected(db, long_url):
    with pytest.raises(InvalidInputError):
        await url_shortener.shorten(db, long_url, BASE_URL)
    assert await db.urls.count() == 0


async def test_custom_code(db):
    record = await url_shortener.shorten(db, "https://example.com", BASE_URL, custom_code="my-link")
    assert record["shortCode"] == "my-link"
    assert await url_shortener.resolve(db, "my-link") == "https://example.com"


async def test_taken_custom_code_is_a_conflict(db):
    await url_shortener.shorten(db, "https://first.example", BASE_URL, custom_code="promo")

    with pytest.raises(ConflictError):
        await url_shortener.shorten(db, "https://second.example", BASE_URL, custom_code="promo")
    assert await url_shortener.resolve(db, "promo") == "https://first.example"


async def test_malformed_custom_code_is_rejected(db):
    with pytest.raises(InvalidInputError):
        await url_shortener.shorten(db, "https://example.com", BASE_URL, custom_code="has space")


async def test_collision_retries_with_new_code(db, monkeypatch):
    await url_shortener.shorten(db, "https://taken.example", BASE_URL, custom_code="AAAAAA")
    codes = iter(["AAAAAA", "BBBBBB"])
    monkeypatch.setattr(url_shortener, "generate_short_code", lambda: next(codes))

    record = await url_shortener.shorten(db, "https://example.com", BASE_URL)
    assert record["shortCode"] == "BBBBBB"


async def test_code_generation_gives_up(db, monkeypatch):
    await url_shortener.shorten(db, "https://taken.example", BASE_URL, custom_code="AAAAAA")
    monkeypatch.setattr(url_shortener, "generate_short_code", lambda: "AAAAAA")

    with pytest.raises(CapacityError):
        await url_shortener.shorten(db, "https://example.com", BASE_URL)
    assert await db.urls.count() == 1


async def test_past_expiry_is_rejected(db):
    with pytest.raises(InvalidInputError):
        await url_shortener.shorten(
            db, "https://example.com", BASE_URL, expires_at=datetime.now(timezone.utc) - timedelta(days=1)
        )


async def test_expired_link_does_not_resolve(db):
    await db.urls.create({
        "longUrl": "https://old.example",
        "shortCode": "old123",
        "shortUrl": f"{BASE_URL}/s/old123",
        "expiresAt": datetime.now(timezone.utc) - timedelta(minutes=1),
    })

    with pytest.raises(NotFoundError):
        await url_shortener.resolve(db, "old123")
    assert (await db.urls.find_one(shortCode="old123"))["clicks"] == 0


async def test_future_expiry_resolves(db):
    expires_at = datetime.now(timezone.utc) + timedelta(days=1)
    record = await url_shortener.shorten(db, "https://example.com", BASE_URL, expires_at=expires_at)

    assert await url_shortener.resolve(db, record["shortCode"]) == "https://example.com"
    assert (await url_shortener.get_stats(db, record["shortCode"]))["expiresAt"] == expires_at


async def test_click_counting_failure_still_redirects(db, monkeypatch):
    record = await url_shortener.shorten(db, "https://example.com", BASE_URL)

    async def broken_counter(*args, **kwargs):
        raise RuntimeError("write failed")

    monkeypatch.setattr(db.urls, "update_counter_by_id", broken_counter)
    assert await url_shortener.resolve(db, record["shortCode"]) == "https://example.com"


async def test_deactivated_link(db):
    record = await url_shortener.shorten(db, "https://example.com", BASE_URL)
    await url_shortener.deactivate(db, record["shortCode"])

    with pytest.raises(NotFoundError):
        await url_shortener.resolve(db, record["shortCode"])
    with pytest.raises(NotFoundError):
        await url_shortener.get_stats(db, record["shortCode"])


async def test_qr_code_is_png(db):
    record = await url_shortener.shorten(db, "https://example.com", BASE_URL)
    png = await url_shortener.qr_code(db, record["shortCode"], "small")
    assert png.startswith(b"\x89PNG\r\n\x1a\n")


async def test_generate_short_code():
    code = url_shortener.generate_short_code()
    assert len(code) == 6
    assert set(code) <= set(url_shortener.SHORT_CODE_CHARS)
    assert len(url_shortener.SHORT_CODE_CHARS) == 62
