import json

import pytest

from vto_analytics.core.dataset import Dataset, parse_collection
from vto_analytics.reporting.metrics import MetricsService


def _product(pid, name, category, enabled=True, sizes=("S", "M", "L")):
    return {
        "id": pid, "sku": f"SKU-{pid}", "name": name, "category": category,
        "brand": "Northwind", "enabled": enabled, "availableSizes": list(sizes),
    }


def _avatar(aid, shopper, created, ms, success=True):
    rec = {
        "id": aid, "shopperId": shopper, "createdAt": created,
        "generationTimeMs": ms, "success": success,
    }
    if not success:
        rec["errorMessage"] = "Generation timeout"
    return rec


def _tryon(tid, avatar, product, created, ms, success=True):
    rec = {
        "id": tid, "avatarId": avatar, "productId": product, "createdAt": created,
        "generationTimeMs": ms, "success": success, "anglesGenerated": 4 if success else 0,
    }
    if not success:
        rec["errorMessage"] = "Garment overlay failed"
    return rec


def _event(eid, shopper, etype, created):
    return {"id": eid, "shopperId": shopper, "type": etype, "createdAt": created}


@pytest.fixture
def raw_collections():
    """
    Deterministic December 2025 dataset.

    4 shoppers, 4 avatars (1 failed), 8 try-ons (1 failed, 1 on an
    unknown product), 5 products (4 enabled), 6 size recommendations,
    a monotonic funnel with no purchases.
    """
    return {
        "products": [
            _product("p1", "Linen Shirt", "tops", sizes=("XS", "S", "M")),
            _product("p2", "Denim Jeans", "bottoms", sizes=("28", "30", "32")),
            _product("p3", "Wrap Dress", "one-pieces"),
            _product("p4", "Silk Blouse", "tops", enabled=False),
            _product("p5", "Chino Shorts", "bottoms"),
        ],
        "shoppers": [
            {"id": "s1", "gender": "female", "heightCm": 165, "age": 28, "country": "US",
             "createdAt": "2025-12-01T09:00:00Z", "completedOnboarding": True,
             "dropOffStage": "completed"},
            {"id": "s2", "gender": "male", "heightCm": 182, "age": 35, "country": "UK",
             "createdAt": "2025-12-02T10:00:00Z", "completedOnboarding": True,
             "dropOffStage": "completed"},
            {"id": "s3", "gender": "female", "heightCm": 158, "age": 22, "country": "US",
             "createdAt": "2025-12-05T11:00:00Z", "completedOnboarding": False,
             "dropOffStage": "photo_upload"},
            {"id": "s4", "gender": "other", "heightCm": 191, "age": 47, "country": "DE",
             "createdAt": "2025-12-10T12:00:00Z", "completedOnboarding": True,
             "dropOffStage": "completed"},
        ],
        "avatars": [
            _avatar("a1", "s1", "2025-12-01T09:10:00Z", 2000),
            _avatar("a2", "s2", "2025-12-02T10:10:00Z", 3000),
            _avatar("a3", "s3", "2025-12-05T11:10:00Z", 5000, success=False),
            _avatar("a4", "s4", "2025-12-10T12:10:00Z", 2500),
        ],
        "tryons": [
            _tryon("t1", "a1", "p1", "2025-12-01T09:20:00Z", 3000),
            _tryon("t2", "a1", "p2", "2025-12-01T09:25:00Z", 3500),
            _tryon("t3", "a2", "p1", "2025-12-02T10:20:00Z", 2500),
            _tryon("t4", "a2", "p3", "2025-12-02T10:30:00Z", 4000, success=False),
            _tryon("t5", "a4", "p1", "2025-12-10T12:20:00Z", 3000),
            _tryon("t6", "a4", "p2", "2025-12-10T12:25:00Z", 2000),
            _tryon("t7", "a4", "p9", "2025-12-10T12:30:00Z", 3000),
            _tryon("t8", "a1", "p5", "2025-12-05T08:00:00Z", 1000),
        ],
        "size_recommendations": [
            {"id": "r1", "shopperId": "s1", "productId": "p1", "recommendedSize": "M",
             "createdAt": "2025-12-01T09:30:00Z"},
            {"id": "r2", "shopperId": "s1", "productId": "p4", "recommendedSize": "XXXL",
             "createdAt": "2025-12-01T09:40:00Z"},
            {"id": "r3", "shopperId": "s2", "productId": "p1", "recommendedSize": "XS",
             "createdAt": "2025-12-02T10:40:00Z"},
            {"id": "r4", "shopperId": "s3", "productId": "p2", "recommendedSize": "32",
             "createdAt": "2025-12-05T11:30:00Z"},
            {"id": "r5", "shopperId": "s3", "productId": "p5", "recommendedSize": "S",
             "createdAt": "2025-12-05T11:40:00Z"},
            {"id": "r6", "shopperId": "s4", "productId": "p1", "recommendedSize": "M",
             "createdAt": "2025-12-10T12:40:00Z"},
        ],
        "events": [
            _event("e1", "s1", "onboarding_started", "2025-12-01T08:00:00Z"),
            _event("e2", "s1", "onboarding_started", "2025-12-01T08:05:00Z"),
            _event("e3", "s1", "photo_uploaded", "2025-12-01T08:30:00Z"),
            _event("e4", "s1", "avatar_created", "2025-12-01T09:10:00Z"),
            _event("e5", "s1", "tryon_completed", "2025-12-01T09:20:00Z"),
            _event("e6", "s2", "onboarding_started", "2025-12-02T09:00:00Z"),
            _event("e7", "s2", "photo_uploaded", "2025-12-02T09:30:00Z"),
            _event("e8", "s2", "avatar_created", "2025-12-02T10:10:00Z"),
            _event("e9", "s2", "tryon_completed", "2025-12-02T10:20:00Z"),
            _event("e10", "s3", "onboarding_started", "2025-12-05T10:00:00Z"),
            _event("e11", "s3", "photo_uploaded", "2025-12-05T10:30:00Z"),
            _event("e12", "s4", "onboarding_started", "2025-12-10T11:00:00Z"),
            _event("e13", "s4", "avatar_created", "2025-12-10T12:10:00Z"),
        ],
    }


@pytest.fixture
def dataset(raw_collections):
    return Dataset.from_records(
        **{name: parse_collection(name, raw) for name, raw in raw_collections.items()}
    )


@pytest.fixture
def service(dataset):
    return MetricsService(dataset)


@pytest.fixture
def empty_service():
    return MetricsService(Dataset())


@pytest.fixture
def data_dir(tmp_path, raw_collections):
    """Dataset written to disk under the default file names."""
    files = {
        "shoppers": "shoppers.json",
        "avatars": "avatars.json",
        "tryons": "tryons.json",
        "products": "products.json",
        "events": "events.json",
        "size_recommendations": "sizeRecommendations.json",
    }
    root = tmp_path / "data"
    root.mkdir()
    for name, filename in files.items():
        (root / filename).write_text(json.dumps(raw_collections[name]), encoding="utf-8")
    return root
