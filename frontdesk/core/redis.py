import redis.asyncio as redis
from frontdesk.core.config import settings

class RedisClient:
    """Active access tokens, keyed by the encoded JWT."""

    def __init__(self):
        self.redis = redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)

    async def set_token(self, token: str, value: str, expire: int):
        await self.redis.set(f"token:{token}", value, ex=expire)

    async def get_token(self, token: str) -> str | None:
        return await self.redis.get(f"token:{token}")

    async def delete_token(self, token: str):
        await self.redis.delete(f"token:{token}")

    async def ping(self) -> bool:
        return await self.redis.ping()

    async def close(self):
        await self.redis.aclose()

redis_client = RedisClient()
