DEFAULT_CONFIG = {
    # -----------------------------
    # DATASET LOCATION
    # -----------------------------
    "dataset": {
        "data_dir": "data",
        "files": {
            "shoppers": "shoppers.json",
            "avatars": "avatars.json",
            "tryons": "tryons.json",
            "products": "products.json",
            "events": "events.json",
            "size_recommendations": "sizeRecommendations.json",
        },
    },

    # -----------------------------
    # RECOMMENDATION THRESHOLDS
    # -----------------------------
    # Rates are integer percentages, latency is milliseconds.
    "thresholds": {
        "completion_rate_warning": 70,
        "completion_rate_critical": 50,
        "category_imbalance_ratio": 2.5,
        "sku_coverage_warning": 85,
        "sku_coverage_critical": 70,
        "tryon_error_rate_warning": 3,
        "tryon_error_rate_critical": 5,
        "tryon_latency_warning_ms": 3000,
        "tryon_latency_critical_ms": 4000,
        "tryon_conversion_warning": 80,
        "tryon_conversion_critical": 60,
        "min_tryons_per_user": 2,
        "xs_share_warning": 0.08,
        "purchase_rate_warning": 15,
        "purchase_rate_critical": 10,
    },

    # -----------------------------
    # CSV EXPORT
    # -----------------------------
    "export": {
        "output_dir": "exports",
        "filename_prefix": "brand_report",
    },

    # -----------------------------
    # METADATA (OPTIONAL)
    # -----------------------------
    "metadata": {
        "framework": "vto-analytics",
    },
}
