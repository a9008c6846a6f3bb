"""Analytics: append-only event log and time-bucketed summaries.

All windows are computed from the server-local "now" at call time, in the
``TIMEZONE`` zone when it is set and the server's own zone otherwise. Day and
month boundaries follow that zone's calendar, DST changes included. Every
summary accepts ``now`` so callers (and tests) can pin the clock.
"""
import logging
from collections import Counter
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from .config import TIMEZONE
from .database import Database, Query, TimeRange
from .errors import InvalidIdentifierError, InvalidInputError

logger = logging.getLogger(__name__)

EVENT_TYPES = ("view", "use", "favorite", "search")
DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

RECENT_DAYS = 30
PREVIOUS_DAYS = 100


def _zone() -> Optional[tzinfo]:
    # None makes astimezone() use the server's zone
    return ZoneInfo(TIMEZONE) if TIMEZONE else None


def _local(moment: datetime) -> datetime:
    return moment.astimezone(_zone())


def _local_now(now: Optional[datetime] = None) -> datetime:
    return _local(now or datetime.now(timezone.utc))


def _day_start(day: date) -> datetime:
    """Local midnight at the start of ``day`` as an aware datetime."""
    midnight = datetime.combine(day, time())
    zone = _zone()
    return midnight.replace(tzinfo=zone) if zone else midnight.astimezone()


async def _events_between(
    db: Database,
    start: datetime,
    end: datetime,
    where: Optional[Dict[str, Any]] = None,
) -> List[Dict[str, Any]]:
    return await db.analytics_events.find(Query(where=where or {}, time_range=TimeRange("timestamp", start, end)))


async def record_event(
    db: Database,
    ip: str,
    tool_id: Optional[str] = None,
    user_id: Optional[str] = None,
    user_agent: Optional[str] = None,
    action: Optional[str] = None,
) -> Tuple[Dict[str, Any], int]:
    """Append one event; unknown actions are recorded as views.

    Returns the new record and the total number of recorded events.
    """
    if not ip:
        raise InvalidInputError("IP address is required")

    record = await db.analytics_events.create({
        "toolId": tool_id or None,
        "userId": user_id or None,
        "ip": ip,
        "userAgent": user_agent,
        "eventType": action if action in EVENT_TYPES else "view",
        "timestamp": datetime.now(timezone.utc),
    })
    return record, await db.analytics_events.count()


async def daily_summary(db: Database, now: Optional[datetime] = None) -> Dict[str, Any]:
    today = _local_now(now).date()
    events = await _events_between(db, _day_start(today), _day_start(today + timedelta(days=1)))
    return {
        "date": today.isoformat(),
        "visits": len(events),
        "uniqueVisitors": len({event["ip"] for event in events}),
    }


async def _daily_buckets(db: Database, today: date, where: Dict[str, Any], days: int = 7) -> List[Dict[str, Any]]:
    first = today - timedelta(days=days - 1)
    events = await _events_between(db, _day_start(first), _day_start(today + timedelta(days=1)), where)

    counts = Counter(_local(event["timestamp"]).date() for event in events)
    buckets = []
    for offset in range(days):
        day = first + timedelta(days=offset)
        buckets.append({"label": DAY_NAMES[day.weekday()], "date": day.isoformat(), "count": counts[day]})
    return buckets


async def weekly_summary(db: Database, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Views per day for the last 7 days including today, oldest first."""
    data = await _daily_buckets(db, _local_now(now).date(), {"eventType": "view"})
    return {
        "period": "Last 7 days",
        "totalVisits": sum(bucket["count"] for bucket in data),
        "data": data,
    }


def _last_months(now: datetime, months: int) -> List[Tuple[int, int]]:
    year, month = now.year, now.month
    result = []
    for _ in range(months):
        result.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    result.reverse()
    return result


async def monthly_summary(db: Database, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Views per calendar month for the last 12 months including this one."""
    now = _local_now(now)
    months = _last_months(now, 12)

    first_year, first_month = months[0]
    next_year, next_month = (now.year + 1, 1) if now.month == 12 else (now.year, now.month + 1)
    start = _day_start(date(first_year, first_month, 1))
    end = _day_start(date(next_year, next_month, 1))

    events = await _events_between(db, start, end, {"eventType": "view"})
    counts = Counter()
    for event in events:
        local = _local(event["timestamp"])
        counts[(local.year, local.month)] += 1

    data = [
        {"label": MONTH_NAMES[month - 1], "month": f"{year}-{month:02d}", "count": counts[(year, month)]}
        for year, month in months
    ]
    return {
        "period": "Last 12 months",
        "totalVisits": sum(bucket["count"] for bucket in data),
        "data": data,
    }


async def popular_tools(db: Database, limit: int = 5) -> List[Dict[str, Any]]:
    """Tools with the most ``use`` events, joined with their names."""
    events = await db.analytics_events.find(Query(where={"eventType": "use"}))
    counts = Counter(event["toolId"] for event in events if event.get("toolId"))

    result = []
    for tool_id, count in counts.most_common():
        if len(result) >= limit:
            break
        try:
            tool = await db.tools.find_by_id(tool_id)
        except InvalidIdentifierError:
            tool = None
        if tool:
            result.append({"toolId": tool_id, "name": tool["name"], "visits": count})
    return result


async def overview(db: Database, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = _local_now(now)
    daily = await daily_summary(db, now)
    weekly = await weekly_summary(db, now)
    return {
        "totalVisits": await db.analytics_events.count(),
        "todayVisits": daily["visits"],
        "popularTools": await popular_tools(db),
        "weeklyTrends": weekly["data"],
    }


async def engagement(db: Database, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Visitor engagement over the last 30 days, keyed by client IP.

    Returning users are IPs active in the last 30 days that were also seen
    between 30 and 100 days ago.
    """
    now = _local_now(now)
    end = _day_start(now.date() + timedelta(days=1))
    instant = now.astimezone(timezone.utc)
    recent_start = instant - timedelta(days=RECENT_DAYS)
    previous_start = instant - timedelta(days=PREVIOUS_DAYS)

    recent = await _events_between(db, recent_start, end)
    previous = await _events_between(db, previous_start, recent_start)

    recent_ips = {event["ip"] for event in recent}
    previous_ips = {event["ip"] for event in previous}
    return {
        "returningUsers": len(recent_ips & previous_ips),
        "activeVisitors": len(recent_ips),
        "eventsPerVisitor": round(len(recent) / len(recent_ips), 2) if recent_ips else 0.0,
    }


async def tool_stats(db: Database, tool_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    where = {"toolId": tool_id, "eventType": "use"}
    return {
        "toolId": tool_id,
        "totalUses": await db.analytics_events.count(Query(where=where)),
        "dailyUses": await _daily_buckets(db, _local_now(now).date(), where),
    }
