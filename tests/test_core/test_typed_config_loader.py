"""Tests for typed config loader: parses review_algorithms.yaml."""

import textwrap
from pathlib import Path

from procedural_memory.domain.models import Algorithm


class TestLoadAlgorithmCatalog:
    def test_shipped_yaml_matches_builtin_tables(self):
        from procedural_memory.core.typed_config_loader import (
            BUILTIN_CATALOG,
            load_algorithm_catalog,
        )

        project_root = Path(__file__).resolve().parent.parent.parent
        catalog = load_algorithm_catalog(project_root / "config" / "review_algorithms.yaml")

        for algorithm in Algorithm:
            loaded = catalog.get_template(algorithm)
            builtin = BUILTIN_CATALOG.get_template(algorithm)
            assert loaded.steps == builtin.steps
            assert len(loaded) == 18

    def test_load_from_minimal_yaml(self, tmp_path):
        from procedural_memory.core.typed_config_loader import load_algorithm_catalog

        yaml_file = tmp_path / "algorithms.yaml"
        yaml_file.write_text(textwrap.dedent("""\
            algorithms:
              motor:
                description: Quick drill
                reviews:
                  - {day: 1, label: "First"}
                  - {day: 2, label: "Second"}
              cognitive:
                reviews:
                  - {day: 1, label: "Only"}
            """))

        catalog = load_algorithm_catalog(yaml_file)

        motor = catalog.get_template(Algorithm.MOTOR)
        assert [(s.day_offset, s.label) for s in motor.steps] == [(1, "First"), (2, "Second")]
        assert motor.description == "Quick drill"
        assert len(catalog.get_template(Algorithm.COGNITIVE)) == 1

    def test_missing_file_returns_builtin(self, tmp_path):
        from procedural_memory.core.typed_config_loader import (
            BUILTIN_CATALOG,
            load_algorithm_catalog,
        )

        assert load_algorithm_catalog(tmp_path / "nonexistent.yaml") is BUILTIN_CATALOG

    def test_invalid_yaml_returns_builtin(self, tmp_path):
        from procedural_memory.core.typed_config_loader import (
            BUILTIN_CATALOG,
            load_algorithm_catalog,
        )

        yaml_file = tmp_path / "algorithms.yaml"
        yaml_file.write_text("algorithms: [unclosed")

        assert load_algorithm_catalog(yaml_file) is BUILTIN_CATALOG

    def test_unknown_algorithm_returns_builtin(self, tmp_path):
        from procedural_memory.core.typed_config_loader import (
            BUILTIN_CATALOG,
            load_algorithm_catalog,
        )

        yaml_file = tmp_path / "algorithms.yaml"
        yaml_file.write_text(textwrap.dedent("""\
            algorithms:
              visual:
                reviews:
                  - {day: 1, label: "Look"}
            """))

        assert load_algorithm_catalog(yaml_file) is BUILTIN_CATALOG

    def test_missing_algorithm_returns_builtin(self, tmp_path):
        from procedural_memory.core.typed_config_loader import (
            BUILTIN_CATALOG,
            load_algorithm_catalog,
        )

        yaml_file = tmp_path / "algorithms.yaml"
        yaml_file.write_text(textwrap.dedent("""\
            algorithms:
              motor:
                reviews:
                  - {day: 1, label: "First"}
            """))

        assert load_algorithm_catalog(yaml_file) is BUILTIN_CATALOG

    def test_decreasing_offsets_return_builtin(self, tmp_path):
        from procedural_memory.core.typed_config_loader import (
            BUILTIN_CATALOG,
            load_algorithm_catalog,
        )

        yaml_file = tmp_path / "algorithms.yaml"
        yaml_file.write_text(textwrap.dedent("""\
            algorithms:
              motor:
                reviews:
                  - {day: 3, label: "Later"}
                  - {day: 1, label: "Earlier"}
              cognitive:
                reviews:
                  - {day: 1, label: "Only"}
            """))

        assert load_algorithm_catalog(yaml_file) is BUILTIN_CATALOG

    def test_row_without_label_returns_builtin(self, tmp_path):
        from procedural_memory.core.typed_config_loader import (
            BUILTIN_CATALOG,
            load_algorithm_catalog,
        )

        yaml_file = tmp_path / "algorithms.yaml"
        yaml_file.write_text(textwrap.dedent("""\
            algorithms:
              motor:
                reviews:
                  - {day: 1}
              cognitive:
                reviews:
                  - {day: 1, label: "Only"}
            """))

        assert load_algorithm_catalog(yaml_file) is BUILTIN_CATALOG


class TestCachedAccessor:
    def test_singleton(self):
        from procedural_memory.core.typed_config_loader import get_algorithm_catalog

        assert get_algorithm_catalog() is get_algorithm_catalog()

    def test_honors_algorithms_path_setting(self, tmp_path, monkeypatch):
        from procedural_memory.core.config import get_settings
        from procedural_memory.core.typed_config_loader import get_algorithm_catalog

        yaml_file = tmp_path / "algorithms.yaml"
        yaml_file.write_text(textwrap.dedent("""\
            algorithms:
              motor:
                reviews:
                  - {day: 1, label: "Solo"}
              cognitive:
                reviews:
                  - {day: 1, label: "Solo"}
            """))
        monkeypatch.setenv("ALGORITHMS_PATH", str(yaml_file))
        get_settings.cache_clear()

        catalog = get_algorithm_catalog()

        assert len(catalog.get_template(Algorithm.MOTOR)) == 1

    def test_clear_caches(self):
        from procedural_memory.core.typed_config_loader import (
            _clear_caches,
            get_algorithm_catalog,
        )

        first = get_algorithm_catalog()
        _clear_caches()

        assert get_algorithm_catalog() is not first
