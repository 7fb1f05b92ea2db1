"""Persistent child and session progress records."""

from typing import Callable, TypeVar
from urllib.parse import quote

import redis.asyncio as redis
from redis.exceptions import RedisError

from joyverse.core.config import StoreBackend, get_settings
from joyverse.core.logging import get_logger
from joyverse.models.session import Child, GameType, Session

logger = get_logger(__name__)

T = TypeVar("T")


class ChildExistsError(ValueError):
    """Raised when a username is already on the therapist's roster."""


class ProgressStore:
    """
    Document store for children and their embedded sessions.

    Each child, with every session it owns, is one JSON document in Redis.
    Writes are plain read-modify-write: two concurrent saves for the same
    child can race, and the later one wins.
    """

    def __init__(self, redis_url: str | None = None, backend: StoreBackend | None = None):
        settings = get_settings()
        self.backend = backend or settings.store_backend
        self.redis_url = redis_url or settings.redis_url
        self._redis: redis.Redis | None = None
        self._redis_checked = False

        # In-memory fallback if Redis unavailable
        self._children: dict[str, str] = {}
        self._rosters: dict[str, set[str]] = {}

    @staticmethod
    def _key(therapist_code: str, username: str) -> str:
        # Each part is percent-encoded, so ":" only ever separates parts
        return f"child:{quote(therapist_code, safe='')}:{quote(username, safe='')}"

    @staticmethod
    def _roster_key(therapist_code: str) -> str:
        return f"roster:{quote(therapist_code, safe='')}"

    async def _get_redis(self) -> redis.Redis | None:
        """Get Redis connection (lazy init)."""
        if self.backend == StoreBackend.MEMORY:
            return None
        if not self._redis_checked:
            self._redis_checked = True
            try:
                self._redis = redis.from_url(self.redis_url, decode_responses=True)
                await self._redis.ping()
            except (RedisError, OSError) as e:
                logger.warning("Redis unavailable, using in-memory store: %s", e)
                self._redis = None
        return self._redis

    async def ping(self) -> str:
        """Report which backend is serving requests."""
        r = await self._get_redis()
        if r is None:
            return "memory"
        try:
            await r.ping()
        except (RedisError, OSError):
            return "disconnected"
        return "connected"

    # ========== Children ==========

    async def get_child(self, therapist_code: str, username: str) -> Child | None:
        """Get a child document by roster code and username."""
        key = self._key(therapist_code, username)
        r = await self._get_redis()
        data = await r.get(key) if r else self._children.get(key)
        if not data:
            return None
        return Child.model_validate_json(data)

    async def save_child(self, child: Child) -> None:
        """Persist the whole child document."""
        key = self._key(child.therapist_code, child.username)
        data = child.model_dump_json()

        r = await self._get_redis()
        if r:
            await r.set(key, data)
            await r.sadd(self._roster_key(child.therapist_code), child.username)
        else:
            self._children[key] = data
            self._rosters.setdefault(child.therapist_code, set()).add(child.username)

    async def register_child(
        self,
        therapist_code: str,
        username: str,
        assigned_themes: list[str] | None = None,
        assigned_games: list[GameType] | None = None,
        preferred_story: str | None = None,
    ) -> Child:
        """
        Add a child to a therapist's roster.

        @raises ChildExistsError - When the username is already taken on this roster
        """
        if await self.get_child(therapist_code, username):
            raise ChildExistsError(f"Child '{username}' already exists for this therapist")

        games = list(dict.fromkeys(assigned_games or []))
        child = Child(
            therapist_code=therapist_code,
            username=username,
            current_assigned_themes=list(assigned_themes or []),
            assigned_games=games,
            preferred_game=games[0] if games else None,
            preferred_story=preferred_story,
        )
        await self.save_child(child)

        logger.info("Registered child", extra={"therapist_code": therapist_code, "child": username})
        return child

    async def list_children(self, therapist_code: str) -> list[str]:
        """Usernames on a therapist's roster, sorted."""
        r = await self._get_redis()
        if r:
            return sorted(await r.smembers(self._roster_key(therapist_code)))
        return sorted(self._rosters.get(therapist_code, set()))

    # ========== Sessions ==========

    async def start_session(self, therapist_code: str, username: str) -> Session | None:
        """
        Open a new session for a child, seeded from the child's preferences.

        @returns The new session, or None when the child is not on the roster
        """
        child = await self.get_child(therapist_code, username)
        if not child:
            return None

        session = Session(
            assigned_themes=list(child.current_assigned_themes),
            preferred_game=child.preferred_game.value if child.preferred_game else None,
            preferred_story=child.preferred_story,
        )
        child.sessions.append(session)
        await self.save_child(child)

        logger.info(
            "Session started",
            extra={"session_id": session.session_id, "therapist_code": therapist_code, "child": username},
        )
        return session

    async def find_session(
        self, therapist_code: str, username: str, session_id: str
    ) -> tuple[Child, Session] | None:
        """Locate a session by its (therapist code, username, session id) triple."""
        child = await self.get_child(therapist_code, username)
        if not child:
            return None
        session = child.find_session(session_id)
        if not session:
            return None
        return child, session

    async def update_session(
        self,
        therapist_code: str,
        username: str,
        session_id: str,
        mutate: Callable[[Session], T],
    ) -> T | None:
        """
        Load a session, apply ``mutate`` to it and save the child document.

        Nothing is saved when ``mutate`` raises.

        @returns Whatever ``mutate`` returned, or None when the session is not found
        """
        found = await self.find_session(therapist_code, username, session_id)
        if not found:
            return None
        child, session = found

        result = mutate(session)
        await self.save_child(child)
        return result


# Global instance
progress_store = ProgressStore()
