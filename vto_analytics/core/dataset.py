"""
Dataset provider.

Loads the six read-only record collections once and validates every
record into its typed model. Aggregators receive the resulting
``Dataset`` explicitly; nothing here is module-level state.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from vto_analytics.config.defaults import DEFAULT_CONFIG
from vto_analytics.core.dates import parse_instant
from vto_analytics.core.models import (
    Avatar,
    Event,
    Product,
    Shopper,
    SizeRecommendation,
    TryOn,
)

logger = logging.getLogger(__name__)


class DatasetError(ValueError):
    """A collection is missing or holds a malformed record."""


@dataclass(frozen=True)
class Dataset:
    shoppers: Tuple[Shopper, ...] = ()
    avatars: Tuple[Avatar, ...] = ()
    tryons: Tuple[TryOn, ...] = ()
    products: Tuple[Product, ...] = ()
    events: Tuple[Event, ...] = ()
    size_recommendations: Tuple[SizeRecommendation, ...] = ()

    @classmethod
    def from_records(
        cls,
        shoppers: Iterable[Shopper] = (),
        avatars: Iterable[Avatar] = (),
        tryons: Iterable[TryOn] = (),
        products: Iterable[Product] = (),
        events: Iterable[Event] = (),
        size_recommendations: Iterable[SizeRecommendation] = (),
    ) -> "Dataset":
        return cls(
            shoppers=tuple(shoppers),
            avatars=tuple(avatars),
            tryons=tuple(tryons),
            products=tuple(products),
            events=tuple(events),
            size_recommendations=tuple(size_recommendations),
        )

    def summary(self) -> Dict[str, int]:
        return {
            "shoppers": len(self.shoppers),
            "avatars": len(self.avatars),
            "tryons": len(self.tryons),
            "products": len(self.products),
            "events": len(self.events),
            "size_recommendations": len(self.size_recommendations),
        }


# -------------------------------------------------
# COLLECTION PARSING
# -------------------------------------------------
_COLLECTIONS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    "shoppers": Shopper.from_dict,
    "avatars": Avatar.from_dict,
    "tryons": TryOn.from_dict,
    "products": Product.from_dict,
    "events": Event.from_dict,
    "size_recommendations": SizeRecommendation.from_dict,
}


def parse_collection(name: str, raw: Any) -> List[Any]:
    """
    Validate a raw JSON collection into typed records.

    Raises DatasetError naming the collection and record index of the
    first bad record.
    """
    if not isinstance(raw, list):
        raise DatasetError(f"Collection '{name}' must be a JSON array")

    factory = _COLLECTIONS[name]
    records = []

    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise DatasetError(f"{name}[{idx}]: record must be an object")
        try:
            record = factory(item)
            created_at = getattr(record, "created_at", None)
            if created_at is not None:
                parse_instant(created_at)
        except KeyError as exc:
            raise DatasetError(f"{name}[{idx}]: missing field {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise DatasetError(f"{name}[{idx}]: {exc}") from exc
        records.append(record)

    return records


def load_dataset(
    data_dir: str,
    files: Optional[Dict[str, str]] = None,
) -> Dataset:
    """
    Load all collections from ``data_dir``.

    ``files`` maps collection name to file name and defaults to the
    ``dataset.files`` section of the default config.
    """
    root = Path(data_dir)
    if not root.is_dir():
        raise DatasetError(f"Data directory not found: {root}")

    file_map = dict(DEFAULT_CONFIG["dataset"]["files"])
    if files:
        file_map.update(files)

    loaded: Dict[str, List[Any]] = {}
    for name in _COLLECTIONS:
        path = root / file_map[name]
        if not path.exists():
            raise DatasetError(f"Collection file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                raw = json.load(f)
            except json.JSONDecodeError as exc:
                raise DatasetError(f"{path.name}: invalid JSON ({exc})") from exc

        loaded[name] = parse_collection(name, raw)
        logger.info("Loaded %s %s from %s", len(loaded[name]), name, path.name)

    return Dataset.from_records(**loaded)


__all__ = ["Dataset", "DatasetError", "parse_collection", "load_dataset"]
