import pytest

from vto_analytics.config import DEFAULT_CONFIG, load_config


def test_defaults_without_file():
    config = load_config(None)

    assert config["dataset"]["data_dir"] == "data"
    assert config["thresholds"]["sku_coverage_warning"] == 85
    assert config["export"]["filename_prefix"] == "brand_report"


def test_user_values_merge_over_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "thresholds:\n"
        "  tryon_error_rate_warning: 10\n"
        "dataset:\n"
        "  files:\n"
        "    shoppers: users.json\n",
        encoding="utf-8",
    )

    config = load_config(str(path))

    assert config["thresholds"]["tryon_error_rate_warning"] == 10
    assert config["thresholds"]["tryon_error_rate_critical"] == 5
    assert config["dataset"]["files"]["shoppers"] == "users.json"
    assert config["dataset"]["files"]["tryons"] == "tryons.json"


def test_defaults_are_not_mutated(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("export:\n  output_dir: out\n", encoding="utf-8")

    load_config(str(path))
    assert DEFAULT_CONFIG["export"]["output_dir"] == "exports"


def test_empty_file_uses_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(str(path))["thresholds"] == DEFAULT_CONFIG["thresholds"]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


def test_non_mapping_document(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(str(path))
