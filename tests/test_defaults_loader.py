"""
Tests for the layered YAML configuration.

Tests cover:
- YAML file loading (missing, empty, malformed)
- Deep merge functionality
- Layer order including the per-vault file
- Section access
- Caching behavior
"""

import yaml

from deltanote.core.defaults_loader import (
    VAULT_CONFIG_NAME,
    clear_cache,
    config_layers,
    deep_merge,
    get_section,
    load_defaults,
    load_layers,
    load_yaml_file,
)


class TestLoadYamlFile:
    """Tests for load_yaml_file function."""

    def test_load_valid_yaml(self, tmp_path):
        yaml_content = {"key": "value", "nested": {"inner": 123}}
        yaml_file = tmp_path / "test.yaml"
        yaml_file.write_text(yaml.dump(yaml_content))

        assert load_yaml_file(yaml_file) == yaml_content

    def test_load_nonexistent_file(self, tmp_path):
        assert load_yaml_file(tmp_path / "nonexistent.yaml") == {}

    def test_load_empty_file(self, tmp_path):
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert load_yaml_file(yaml_file) == {}

    def test_load_non_mapping(self, tmp_path):
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        assert load_yaml_file(yaml_file) == {}

    def test_load_unparsable(self, tmp_path):
        yaml_file = tmp_path / "broken.yaml"
        yaml_file.write_text("delta: [unclosed\n")

        assert load_yaml_file(yaml_file) == {}

    def test_directory_is_not_a_file(self, tmp_path):
        assert load_yaml_file(tmp_path) == {}


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_nested_merge(self):
        base = {"delta": {"tag_name": "delta", "default_interval": 1}}
        override = {"delta": {"default_interval": 3}}

        result = deep_merge(base, override)

        assert result == {"delta": {"tag_name": "delta", "default_interval": 3}}

    def test_does_not_mutate_base(self):
        base = {"a": 1}
        deep_merge(base, {"a": 2, "b": 3})

        assert base == {"a": 1}

    def test_override_replaces_non_dict(self):
        assert deep_merge({"a": {"b": 1}}, {"a": 5}) == {"a": 5}


class TestLayers:
    def test_layer_order_without_vault(self, tmp_path):
        layers = config_layers(config_dir=tmp_path)

        assert layers == [tmp_path / "defaults.yaml", tmp_path / "settings.yaml"]

    def test_vault_layer_is_last(self, tmp_path):
        vault = tmp_path / "vault"

        assert config_layers(vault, config_dir=tmp_path)[-1] == vault / VAULT_CONFIG_NAME

    def test_later_layers_win(self, tmp_path):
        defaults = tmp_path / "defaults.yaml"
        defaults.write_text("delta:\n  default_interval: 1\n  tag_name: delta\n")
        settings = tmp_path / "settings.yaml"
        settings.write_text("delta:\n  default_interval: 7\n")
        vault_file = tmp_path / VAULT_CONFIG_NAME
        vault_file.write_text("delta:\n  tag_name: review\n")

        config = load_layers([defaults, settings, vault_file])

        assert config["delta"] == {"default_interval": 7, "tag_name": "review"}

    def test_missing_layers_are_skipped(self, tmp_path):
        defaults = tmp_path / "defaults.yaml"
        defaults.write_text("a: 1\n")

        assert load_layers([defaults, tmp_path / "nope.yaml"]) == {"a": 1}

    def test_cache_reused_until_cleared(self, tmp_path):
        defaults = tmp_path / "defaults.yaml"
        defaults.write_text("a: 1\n")

        first = load_layers([defaults])
        defaults.write_text("a: 2\n")
        assert load_layers([defaults]) is first
        assert load_layers([defaults], reload=True)["a"] == 2

        defaults.write_text("a: 3\n")
        clear_cache()
        assert load_layers([defaults])["a"] == 3


class TestProjectDefaults:
    def test_project_defaults_have_delta_section(self):
        config = load_defaults(reload=True)

        assert config["delta"]["tag_name"] == "delta"

    def test_vault_overrides_project_defaults(self, tmp_path):
        (tmp_path / VAULT_CONFIG_NAME).write_text("delta:\n  daily_notes_folder: daily\n")

        section = get_section("delta", vault=tmp_path)

        assert section["daily_notes_folder"] == "daily"
        assert section["tag_name"] == "delta"

    def test_section_from_given_config(self):
        assert get_section("delta", config={"delta": {"a": 1}}) == {"a": 1}
        assert get_section("delta", config={"delta": [1, 2]}) == {}
        assert get_section("delta", config={}) == {}
