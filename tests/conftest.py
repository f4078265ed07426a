"""Shared fixtures for the importer test suite."""

from pathlib import Path

import pytest

from common.config import ImporterConfig
from common.logger import ImportLogger
from import_utils.classifier import Classification
from import_utils.models import MediaKind
from import_utils.ranker import Ranking


@pytest.fixture
def config(tmp_path):
    """Config with empty library roots under tmp_path"""
    library = tmp_path / "library"
    for folder in ("TV", "Documentaries", "Movies"):
        (library / folder).mkdir(parents=True)

    return ImporterConfig(
        tv_root=library / "TV",
        documentary_root=library / "Documentaries",
        movie_root=library / "Movies",
        visible_results=5,
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def import_logger(tmp_path):
    return ImportLogger(log_dir=tmp_path / "logs", enable_console=False)


def make_ranking(candidates, kind=None, fields=None, visible_results=5):
    """Ranking around hand-built candidates and one kind's fields"""
    classifications = {}
    if kind is not None:
        classifications[kind] = Classification(kind, "test", fields or {})
    return Ranking(list(candidates), classifications, visible_results)


def touch(path: Path, content: str = "video") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path
