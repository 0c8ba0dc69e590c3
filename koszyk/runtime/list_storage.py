"""Storage and retrieval of shopping lists created from receipts.

Lists are kept in memory and, when a directory is configured, written as one
JSON file per list:

    data/shopping_lists/
    └── <list id>.json
"""

import json
import threading
import uuid
from functools import lru_cache
from pathlib import Path

from koszyk.domain.shopping_list import ShoppingList, ShoppingListItem
from koszyk.runtime.logging import get_logger
from koszyk.runtime.paths import get_paths

logger = get_logger(__name__)


class ShoppingListStoreError(RuntimeError):
    """Raised when a shopping list cannot be stored or read back."""


class ShoppingListStore:
    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory
        self._lists: dict[str, ShoppingList] = {}
        self._lock = threading.Lock()

    def _list_path(self, list_id: str) -> Path:
        assert self.directory is not None
        return self.directory / f"{list_id}.json"

    def create(self, name: str, items: list[ShoppingListItem]) -> ShoppingList:
        """Create and persist a new shopping list."""
        shopping_list = ShoppingList(id=uuid.uuid4().hex, name=name, items=list(items))

        if self.directory is not None:
            try:
                self.directory.mkdir(parents=True, exist_ok=True)
                self._list_path(shopping_list.id).write_text(
                    json.dumps(shopping_list.to_dict(), indent=2, ensure_ascii=False),
                    encoding="utf-8",
                )
            except OSError as e:
                logger.error("Failed to save shopping list %s: %s", shopping_list.id, e)
                raise ShoppingListStoreError(f"Failed to save shopping list: {e}") from e

        with self._lock:
            self._lists[shopping_list.id] = shopping_list
        logger.info("Created shopping list %s (%s) with %d items", shopping_list.id, name, len(items))
        return shopping_list

    def get(self, list_id: str) -> ShoppingList | None:
        """Return a list by id, or None if it does not exist."""
        with self._lock:
            cached = self._lists.get(list_id)
        if cached is not None:
            return cached
        if self.directory is None or not _is_list_id(list_id):
            return None

        path = self._list_path(list_id)
        if not path.exists():
            return None
        try:
            shopping_list = ShoppingList.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError, KeyError) as e:
            raise ShoppingListStoreError(f"Failed to read shopping list {list_id}: {e}") from e

        with self._lock:
            self._lists[list_id] = shopping_list
        return shopping_list

    def list_ids(self) -> list[str]:
        """Ids of all known lists, in-memory and on disk."""
        with self._lock:
            ids = set(self._lists)
        if self.directory is not None and self.directory.exists():
            ids.update(path.stem for path in self.directory.glob("*.json"))
        return sorted(ids)


def _is_list_id(value: str) -> bool:
    # Ids are uuid4 hex strings; anything else must not reach the filesystem.
    return len(value) == 32 and all(c in "0123456789abcdef" for c in value)


@lru_cache(maxsize=1)
def get_list_store() -> ShoppingListStore:
    """Return the process-wide store rooted at the project's shopping_lists directory."""
    return ShoppingListStore(get_paths().shopping_lists)
