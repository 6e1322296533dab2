"""Read-through loaders for the option lists of the asset filter bar."""
import logging
from typing import Generic, TypeVar
from pydantic import BaseModel, ConfigDict
from assetdesk.core.cycles import FetchCycleOwner
from assetdesk.core.errors import RemoteQueryError
from assetdesk.modules.catalogs.repository import CatalogRepository
from assetdesk.modules.catalogs.schemas import Character, Property

logger = logging.getLogger(__name__)

T = TypeVar("T")

class ReferenceState(BaseModel, Generic[T]):
    model_config = ConfigDict(frozen=True)

    items: tuple[T, ...] = ()
    loading: bool = True

class _ReferenceLoader(FetchCycleOwner):
    what = "reference data"

    def __init__(self, repo: CatalogRepository):
        super().__init__()
        self.repo = repo
        self._items: tuple = ()
        self._loading = True

    @property
    def items(self) -> tuple:
        return self._items

    @property
    def loading(self) -> bool:
        return self._loading

    def _load(self, fetch):
        self._ensure_open()
        generation = self._next_generation()
        self._loading = True
        self._notify()
        return self._spawn(self._run(generation, fetch))

    async def _run(self, generation: int, fetch) -> None:
        try:
            items = tuple(await fetch())
        except RemoteQueryError as e:
            # option lists degrade to empty; the asset list itself still works
            logger.warning(f"Loading {self.what} failed: {e.message}")
            items = ()
        except Exception:
            logger.exception(f"Loading {self.what} crashed")
            items = ()
        if not self._is_current(generation):
            return
        self._items = items
        self._loading = False
        self._notify()

class PropertiesLoader(_ReferenceLoader):
    what = "properties"

    @property
    def snapshot(self) -> ReferenceState[Property]:
        return ReferenceState[Property](items=self._items, loading=self._loading)

    def mount(self):
        """Load once; later calls reuse what is already loaded or loading."""
        if self._task is not None:
            return self._task
        return self._load(self.repo.list_properties)

class CharactersLoader(_ReferenceLoader):
    what = "characters"

    def __init__(self, repo: CatalogRepository):
        super().__init__(repo)
        self._property_id: str | None = None
        self._mounted = False

    @property
    def property_id(self) -> str | None:
        return self._property_id

    @property
    def snapshot(self) -> ReferenceState[Character]:
        return ReferenceState[Character](items=self._items, loading=self._loading)

    def mount(self, property_id: str | None = None):
        self._mounted = True
        self._property_id = property_id or None
        pid = self._property_id
        return self._load(lambda: self.repo.list_characters(pid))

    def set_property(self, property_id: str | None):
        """Re-fetch when the property changes, including back to "all characters"."""
        property_id = property_id or None
        if self._mounted and property_id == self._property_id:
            return self._task
        return self.mount(property_id)
