from pathlib import Path

import pytest

from makecomp.config import CONFIG_SCHEMA, Configuration, coerce_to_bool
from makecomp.config_loader import ConfigLoader, find_similar_key
from makecomp.constants import DEFAULT_MARKER
from makecomp.models import MakecompError


def test_defaults(test_logger):
    conf = Configuration(logger=test_logger)
    assert conf.get_str("marker") == DEFAULT_MARKER
    assert conf.get_bool("use_cache") is True
    assert conf.get_list("commands") == ["make"]
    assert conf.get_list("makefiles") == ["GNUmakefile", "makefile", "Makefile"]
    assert conf.get("missing") is None
    assert conf.get("missing", 3) == 3


def test_explicit_values_win(test_logger):
    conf = Configuration({"marker": "#!", "commands": ["make", "gmake"]}, logger=test_logger)
    assert conf.get_str("marker") == "#!"
    assert conf.get_list("commands") == ["make", "gmake"]


def test_get_list(test_logger):
    conf = Configuration({"a": "single", "b": [1, "two"], "c": 42}, logger=test_logger)
    assert conf.get_list("a") == ["single"]
    assert conf.get_list("b") == ["1", "two"]
    assert conf.get_list("c", ["fallback"]) == ["fallback"]
    assert conf.get_list("missing") == []


def test_get_path(test_logger, monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("MAKECOMP_TEST_DIR", "sub")
    conf = Configuration({"cache_dir": "~/$MAKECOMP_TEST_DIR/cache"}, logger=test_logger)
    assert conf.get_path("cache_dir") == tmp_path / "sub" / "cache"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, True),
        ("true", True),
        ("yes", True),
        ("1", True),
        ("anything", True),
        (False, False),
        ("false", False),
        ("Off", False),
        ("0", False),
        ("disabled", False),
        ("", False),
        ("  ", False),
        (0, False),
    ],
)
def test_coerce_to_bool(value, expected):
    assert coerce_to_bool(value) is expected


def test_coerce_to_bool_default():
    assert coerce_to_bool(None) is False
    assert coerce_to_bool(None, default=True) is True


def test_schema_names():
    assert CONFIG_SCHEMA.names() == ["marker", "cache_dir", "makefiles", "commands", "use_cache"]
    assert CONFIG_SCHEMA.get("marker").default == DEFAULT_MARKER
    assert CONFIG_SCHEMA.get("nope") is None


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def _write(self, tmp_path: Path, content: str) -> Path:
        path = tmp_path / "config.toml"
        path.write_text(content)
        return path

    def test_load(self, tmp_path, test_logger):
        path = self._write(tmp_path, '[makecomp]\nmarker = "#!"\nuse_cache = false\ncommands = ["make", "gmake"]\n')
        conf = ConfigLoader(test_logger).load(str(path))
        assert conf.get_str("marker") == "#!"
        assert conf.get_bool("use_cache") is False
        assert conf.get_list("commands") == ["make", "gmake"]
        assert conf.get_list("makefiles") == ["GNUmakefile", "makefile", "Makefile"]

    def test_missing_file_gives_defaults(self, tmp_path, test_logger):
        conf = ConfigLoader(test_logger).load(str(tmp_path / "nope.toml"))
        assert conf.get_str("marker") == DEFAULT_MARKER

    def test_other_sections_ignored(self, tmp_path, test_logger):
        path = self._write(tmp_path, '[other]\nmarker = "x"\n')
        assert ConfigLoader(test_logger).load(str(path)).get_str("marker") == DEFAULT_MARKER

    def test_syntax_error(self, tmp_path, test_logger):
        path = self._write(tmp_path, "[makecomp\nmarker = \n")
        with pytest.raises(MakecompError):
            ConfigLoader(test_logger).load(str(path))

    def test_section_not_a_table(self, tmp_path, test_logger):
        path = self._write(tmp_path, 'makecomp = "oops"\n')
        with pytest.raises(MakecompError):
            ConfigLoader(test_logger).load(str(path))

    def test_unknown_key_warning(self, tmp_path, test_logger):
        path = self._write(tmp_path, '[makecomp]\nmarkr = "#!"\n')
        loader = ConfigLoader(test_logger)
        loader.load(str(path))
        warnings = loader.warn_unknown_keys({"markr": "#!", "marker": "##"})
        assert warnings == ["Unknown option 'markr' in [makecomp], did you mean 'marker'?"]

    def test_resolve_path_expands(self, tmp_path, test_logger, monkeypatch):
        monkeypatch.setenv("MAKECOMP_TEST_DIR", str(tmp_path))
        assert ConfigLoader(test_logger).resolve_path("$MAKECOMP_TEST_DIR/c.toml") == tmp_path / "c.toml"


def test_find_similar_key():
    assert find_similar_key("comands", ["commands", "marker"]) == "commands"
    assert find_similar_key("zzz", ["commands", "marker"]) is None


class TestTypeChecks:
    """Values of the wrong type fall back to the defaults."""

    @pytest.mark.parametrize(
        ("key", "value", "ok"),
        [
            ("marker", "#!", True),
            ("marker", 3, False),
            ("use_cache", False, True),
            ("use_cache", "off", True),
            ("use_cache", "maybe", False),
            ("use_cache", 1, False),
            ("commands", ["make", "gmake"], True),
            ("commands", "make", True),
            ("commands", ["make", 2], False),
            ("makefiles", {"a": 1}, False),
        ],
    )
    def test_accepts(self, key, value, ok):
        assert CONFIG_SCHEMA.get(key).accepts(value) is ok

    def test_type_name(self):
        assert CONFIG_SCHEMA.get("commands").type_name == "list or str"
        assert CONFIG_SCHEMA.get("use_cache").type_name == "bool"

    def test_invalid_value_uses_default(self, tmp_path, test_logger, mocker):
        path = tmp_path / "config.toml"
        path.write_text('[makecomp]\nuse_cache = 1\nmarker = "#!"\n')
        error = mocker.spy(test_logger, "error")

        conf = ConfigLoader(test_logger).load(str(path))

        assert conf.get_bool("use_cache") is True
        assert conf.get_str("marker") == "#!"
        assert error.call_count == 1
        assert "Persist parsed annotations between completions" in error.call_args.args

    def test_check_types(self, test_logger):
        loader = ConfigLoader(test_logger)
        assert loader.check_types({"marker": 1, "commands": "make", "unknown": 3}) == ["marker"]
