"""In-process cache of effective permission sets."""

from collections import OrderedDict
from datetime import datetime

from portalauthz.application.dto.authorization_dto import EffectivePermissionSet


class InMemoryPermissionCache:
    """LRU cache keyed by user id with generation-checked writes.

    Every invalidation advances a counter. ``put`` drops a result whose
    generation predates the latest invalidation touching its user, so a
    resolution racing with a mutation cannot reinstate stale permissions.
    Entries are also ignored once their ``valid_until`` has passed.
    """

    def __init__(self, max_entries: int = 10_000) -> None:
        self._max_entries = max_entries
        self._entries: OrderedDict[str, EffectivePermissionSet] = OrderedDict()
        self._counter = 0
        self._user_invalidated: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, user_id: str, at: datetime) -> EffectivePermissionSet | None:
        entry = self._entries.get(user_id)
        if entry is None:
            return None
        if not entry.is_fresh_at(at):
            del self._entries[user_id]
            return None
        self._entries.move_to_end(user_id)
        return entry

    def generation(self, user_id: str) -> int:
        return self._counter

    def put(self, result: EffectivePermissionSet, generation: int) -> None:
        if generation < self._user_invalidated.get(result.user_id, 0):
            return
        self._entries[result.user_id] = result
        self._entries.move_to_end(result.user_id)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    def invalidate_user(self, user_id: str) -> None:
        self._counter += 1
        self._user_invalidated[user_id] = self._counter
        self._entries.pop(user_id, None)
