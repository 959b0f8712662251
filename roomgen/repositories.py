"""
Content repositories for monster and item data.

Repositories are OPTIONAL collaborators of the room service: the placement
engine only reads fields already present on entities. Two families ship here:

1. InMemory*Repository - dict-backed, no network (tests, offline generation)
2. API*Repository - the public D&D 5e SRD REST API over blocking HTTP

API repositories retry transient network failures (connection errors, 5xx)
with tenacity, up to ``Config.API_MAX_ATTEMPTS`` attempts. Client errors (4xx)
and malformed payloads fail immediately with ``RepositoryError``.

Usage pattern:
    items = APIItemRepository()
    longsword = items.get_item_by_key("longsword")
"""

from __future__ import annotations

import json
import random
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib import error, request

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .config import Config
from .converters import equipment_index, item_from_api
from .errors import RepositoryError
from .logging_utils import log_error, log_repository
from .schemas import Item, Monster, new_entity_id


class MonsterRepository(ABC):
    """Source of monster reward data."""

    @abstractmethod
    def get_monster_xp(self, key: str) -> int:
        """Return the XP awarded for defeating the monster ``key``.

        Raises:
            RepositoryError: If the monster is unknown or cannot be fetched
        """


class ItemRepository(ABC):
    """Source of item data. Every returned Item carries a fresh id."""

    @abstractmethod
    def get_item_by_key(self, key: str) -> Item:
        """Return the item ``key``.

        Raises:
            RepositoryError: If the item is unknown or cannot be fetched
        """

    @abstractmethod
    def get_random_items(self, count: int, rng: Optional[random.Random] = None) -> List[Item]:
        """Return up to ``count`` distinct random items."""

    @abstractmethod
    def get_random_items_by_category(
        self, category: str, count: int, rng: Optional[random.Random] = None
    ) -> List[Item]:
        """Return up to ``count`` distinct random items of ``category``."""


# ============================================================================
# In-memory implementations
# ============================================================================


class InMemoryMonsterRepository(MonsterRepository):
    """Monster XP lookups from a plain mapping of key -> XP."""

    def __init__(self, xp_by_key: Optional[Mapping[str, int]] = None):
        self._xp: Dict[str, int] = dict(xp_by_key or {})

    @classmethod
    def from_monsters(cls, monsters: Iterable[Monster]) -> "InMemoryMonsterRepository":
        return cls({monster.key: monster.xp for monster in monsters})

    def add(self, key: str, xp: int) -> None:
        self._xp[key] = xp

    def get_monster_xp(self, key: str) -> int:
        try:
            return self._xp[key]
        except KeyError:
            raise RepositoryError(f"unknown monster key: {key}") from None


class InMemoryItemRepository(ItemRepository):
    """Item catalogue held in memory, keyed by ``Item.key``."""

    def __init__(self, items: Optional[Iterable[Item]] = None):
        self._items: Dict[str, Item] = {}
        for item in items or []:
            self.add(item)

    def add(self, item: Item) -> None:
        self._items[item.key] = item.model_copy(deep=True)

    def _fresh(self, item: Item) -> Item:
        return item.model_copy(deep=True, update={"id": new_entity_id()})

    def get_item_by_key(self, key: str) -> Item:
        try:
            return self._fresh(self._items[key])
        except KeyError:
            raise RepositoryError(f"unknown item key: {key}") from None

    def _sample(self, pool: List[Item], count: int, rng: Optional[random.Random]) -> List[Item]:
        chooser = rng if rng is not None else random
        picked = chooser.sample(pool, min(max(count, 0), len(pool)))
        return [self._fresh(item) for item in picked]

    def get_random_items(self, count: int, rng: Optional[random.Random] = None) -> List[Item]:
        return self._sample(list(self._items.values()), count, rng)

    def get_random_items_by_category(
        self, category: str, count: int, rng: Optional[random.Random] = None
    ) -> List[Item]:
        wanted = category.lower()
        pool = [item for item in self._items.values() if item.category.lower() == wanted]
        return self._sample(pool, count, rng)


# ============================================================================
# D&D 5e SRD API implementations
# ============================================================================


class _TransientAPIError(RepositoryError):
    """Network failure worth retrying."""


def _perform_get(url: str, timeout: float) -> Any:
    """Execute one blocking GET and decode the JSON body."""

    req = request.Request(url, headers={"Accept": "application/json"}, method="GET")
    try:
        with request.urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8")
    except error.HTTPError as exc:
        if exc.code >= 500:
            raise _TransientAPIError(f"GET {url} failed with status {exc.code}") from exc
        raise RepositoryError(f"GET {url} failed with status {exc.code}: {exc.reason}") from exc
    except error.URLError as exc:
        raise _TransientAPIError(f"Could not reach {url}: {exc.reason}") from exc

    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RepositoryError(f"GET {url} returned non-JSON response.") from exc


class DndApiClient:
    """Minimal JSON client for the D&D 5e SRD API with retry on transient failures."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
    ):
        self.base_url = (base_url or Config.DND_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else Config.API_TIMEOUT_SECONDS
        self.max_attempts = max_attempts if max_attempts is not None else Config.API_MAX_ATTEMPTS

    def get(self, path: str) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        attempt_number = 0
        # Only _TransientAPIError triggers another attempt; 4xx and decode
        # errors propagate on the first try. reraise=True surfaces the last
        # transient error once attempts run out.
        for attempt in Retrying(
            retry=retry_if_exception_type(_TransientAPIError),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=0.25, max=2.0),
            reraise=True,
        ):
            with attempt:
                attempt_number += 1
                if attempt_number > 1:
                    log_error(f"[Repository] retry {attempt_number}/{self.max_attempts} for {url}")
                return _perform_get(url, self.timeout)

        raise RepositoryError("API retry mechanism exited unexpectedly")


class APIMonsterRepository(MonsterRepository):
    """Monster XP from ``/api/monsters/{key}``."""

    def __init__(self, client: Optional[DndApiClient] = None):
        self.client = client or DndApiClient()

    def get_monster_xp(self, key: str) -> int:
        log_repository(f"[Repository] fetching monster '{key}'")
        data = self.client.get(f"/api/monsters/{key}")
        if "xp" not in data:
            raise RepositoryError(f"monster '{key}' payload has no xp field")
        return int(data["xp"])


class APIItemRepository(ItemRepository):
    """Equipment from ``/api/equipment``.

    Equipment payloads are cached per repository instance, so repeated lookups
    of the same key hit the network once.
    """

    def __init__(self, client: Optional[DndApiClient] = None):
        self.client = client or DndApiClient()
        self._payloads: Dict[str, Dict[str, Any]] = {}

    def _payload(self, key: str) -> Dict[str, Any]:
        if key not in self._payloads:
            log_repository(f"[Repository] fetching equipment '{key}'")
            self._payloads[key] = self.client.get(f"/api/equipment/{key}")
        return self._payloads[key]

    def get_item_by_key(self, key: str) -> Item:
        item = item_from_api(self._payload(key))
        if not item.key:
            item.key = key
        return item

    def _load_some(self, keys: List[str], count: int, rng: Optional[random.Random]) -> List[Item]:
        chooser = rng if rng is not None else random
        shuffled = list(keys)
        chooser.shuffle(shuffled)

        items: List[Item] = []
        for key in shuffled:
            if len(items) >= count:
                break
            try:
                items.append(self.get_item_by_key(key))
            except RepositoryError as exc:
                # One broken entry should not sink the whole loot roll.
                log_error(f"[Repository] skipping equipment '{key}': {exc}")
        return items

    def get_random_items(self, count: int, rng: Optional[random.Random] = None) -> List[Item]:
        listing = self.client.get("/api/equipment")
        return self._load_some(equipment_index(listing), count, rng)

    def get_random_items_by_category(
        self, category: str, count: int, rng: Optional[random.Random] = None
    ) -> List[Item]:
        listing = self.client.get(f"/api/equipment-categories/{category.lower()}")
        keys = [str(entry["index"]) for entry in listing.get("equipment", []) if entry.get("index")]
        return self._load_some(keys, count, rng)


__all__ = [
    "MonsterRepository",
    "ItemRepository",
    "InMemoryMonsterRepository",
    "InMemoryItemRepository",
    "DndApiClient",
    "APIMonsterRepository",
    "APIItemRepository",
]
