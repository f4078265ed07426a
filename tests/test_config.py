"""Tests for configuration loading."""

import json
from pathlib import Path

import pytest

from common.config import ConfigError, ImporterConfig, load_config


class TestFromDict:
    def test_roots_derive_from_media_root(self):
        config = ImporterConfig.from_dict({"media_root": "/nas"})

        assert config.tv_root == Path("/nas/TV")
        assert config.documentary_root == Path("/nas/Documentaries")
        assert config.movie_root == Path("/nas/Movies")

    def test_defaults(self):
        config = ImporterConfig.from_dict({})

        assert config.tv_root == Path("/media/TV")
        assert config.primary_remux_tool == "ffmpeg"
        assert config.secondary_remux_tool == "ffmpeg"
        assert config.visible_results == 5
        assert config.strip_reserved_characters is True

    def test_explicit_roots_override_media_root(self):
        config = ImporterConfig.from_dict({"media_root": "/nas", "movie_root": "/films"})

        assert config.movie_root == Path("/films")
        assert config.tv_root == Path("/nas/TV")

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="tv_rot"):
            ImporterConfig.from_dict({"tv_rot": "/nas/TV"})

    @pytest.mark.parametrize("value", [0, -2, "5", True])
    def test_invalid_visible_results(self, value):
        with pytest.raises(ConfigError):
            ImporterConfig.from_dict({"visible_results": value})

    def test_invalid_strip_flag(self):
        with pytest.raises(ConfigError):
            ImporterConfig.from_dict({"strip_reserved_characters": "yes"})


class TestLoadConfig:
    def test_no_path_uses_defaults(self):
        assert load_config(None).visible_results == 5

    def test_reads_json_file(self, tmp_path):
        path = tmp_path / "nas.json"
        path.write_text(json.dumps({"media_root": str(tmp_path), "visible_results": 3, "omdb_api_key": "k"}))

        config = load_config(path)

        assert config.tv_root == tmp_path / "TV"
        assert config.visible_results == 3
        assert config.omdb_api_key == "k"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "nas.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "nas.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigError):
            load_config(path)
