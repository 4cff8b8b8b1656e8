"""Recipe lookup service adapters.

`fetch_random(count, category, exclude_ids)` returns at most `count` recipes of
`category` whose id is not in `exclude_ids`. A short or empty answer means the
pool is exhausted and is not an error; transport failures raise RecipeLookupError.
"""
import json
import logging
import random
from pathlib import Path
from typing import AbstractSet, Iterable, List, Optional, Protocol, Union

import httpx

from menu.domain.Recipe import Recipe
from menu.utilities.errors import RecipeLookupError

logger = logging.getLogger(__name__)


class RecipeLookupService(Protocol):
    def fetch_random(self, count: int, category: str, exclude_ids: AbstractSet[str]) -> List[Recipe]:
        ...


def build_exclude_param(ids: Iterable[str]) -> str:
    return ",".join(str(i) for i in ids if i)


class HttpRecipeLookup:
    """Client for the recipe API: GET {base_url}/recipe/random?count=&category=&exclude=."""

    def __init__(self, base_url: str, *, timeout: float = 10.0, client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpRecipeLookup":  # pragma: no cover - trivial
        return self

    def __exit__(self, *exc: object) -> None:  # pragma: no cover - trivial
        self.close()

    def fetch_random(self, count: int, category: str, exclude_ids: AbstractSet[str]) -> List[Recipe]:
        if count <= 0:
            return []
        params = {"count": str(count), "category": category}
        exclude = build_exclude_param(sorted(exclude_ids))
        if exclude:
            params["exclude"] = exclude
        url = f"{self.base_url}/recipe/random"
        try:
            response = self._client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise RecipeLookupError(f"Recipe API answered {e.response.status_code} for {category}") from e
        except httpx.HTTPError as e:
            raise RecipeLookupError(f"Recipe API unreachable: {e}") from e
        except ValueError as e:
            raise RecipeLookupError(f"Invalid JSON from recipe API: {e}") from e

        if not isinstance(data, list):
            logger.warning("Recipe API returned %s instead of a list; treating as empty", type(data).__name__)
            return []
        recipes = [r for r in (Recipe.from_dict(item) for item in data) if r is not None]
        logger.debug("Fetched %d/%d %s recipes (%d excluded)", len(recipes), count, category, len(exclude_ids))
        return recipes[:count]


class LocalRecipeLookup:
    """In-process lookup drawing random recipes from a fixed list (JSON file or explicit recipes)."""

    def __init__(self, recipes: Iterable[Recipe] = (), *, seed: Optional[int] = None):
        self.recipes: List[Recipe] = list(recipes)
        self._rng = random.Random(seed)

    @classmethod
    def from_json(cls, path: Union[str, Path], *, seed: Optional[int] = None) -> "LocalRecipeLookup":
        return cls(reading_from_recipes(path), seed=seed)

    def fetch_random(self, count: int, category: str, exclude_ids: AbstractSet[str]) -> List[Recipe]:
        if count <= 0:
            return []
        pool = [r for r in self.recipes if r.category == category and r.id not in exclude_ids]
        return self._rng.sample(pool, min(count, len(pool)))


def reading_from_recipes(path: Union[str, Path]) -> List[Recipe]:
    """Read recipes from a JSON file with proper error handling."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            recipes_data = json.load(f)
    except FileNotFoundError:
        logger.warning("Recipes file not found: %s. Returning empty list.", path)
        return []
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in recipes file: %s", e)
        return []
    except OSError as e:
        logger.error("Error reading recipes: %s", e)
        return []
    if not isinstance(recipes_data, list):
        logger.error("Recipes file %s does not contain a list", path)
        return []
    return [r for r in (Recipe.from_dict(entry) for entry in recipes_data) if r is not None]
