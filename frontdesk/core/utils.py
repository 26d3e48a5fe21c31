import math
import secrets
from datetime import date, datetime

def generate_password():
    adjectives = ["Happy", "Sunny", "Clever", "Brave", "Calm", "Eager", "Fancy", "Jolly", "Kind", "Lively"]
    nouns = ["Tiger", "Lion", "Eagle", "Panda", "Bear", "Wolf", "Fox", "Hawk", "Owl", "Deer"]

    adj = secrets.choice(adjectives)
    noun = secrets.choice(nouns)
    number = secrets.randbelow(1000)

    return f"{adj}-{noun}-{number:03d}"

def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0

def minutes_between(start, end) -> float:
    return (end - start).total_seconds() / 60

def utc_today() -> date:
    # Stored timestamps are naive UTC, so "today" is the UTC calendar day
    return datetime.utcnow().date()
