import pytest
from pathlib import Path

from viewloader.config.loader import find_config_file, load_settings, split_delimiters
from viewloader.config.settings import DEFAULT_DATE_FORMAT, LoaderSettings
from viewloader.exceptions import ConfigError

@pytest.mark.parametrize("spec, expected", [
    ("[[ ]]", ("[[", "]]")),
    ("<% %>", ("<%", "%>")),
    ("{{ }}", ("{{", "}}")),
])
def test_split_delimiters(spec, expected):
    assert split_delimiters(spec) == expected

@pytest.mark.parametrize("spec", ["[[]]", "[[ ]] ]]", "[[  ]]", " ]]", ""])
def test_split_delimiters_rejects_malformed(spec):
    with pytest.raises(ConfigError, match="Incorrect format for template delimiters"):
        split_delimiters(spec)

def test_no_config_file_gives_defaults(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert find_config_file() is None
    settings = load_settings()
    assert settings == LoaderSettings()
    assert settings.date_format == DEFAULT_DATE_FORMAT

def test_explicit_missing_config_raises(tmp_path: Path):
    with pytest.raises(ConfigError, match="Config file not found"):
        load_settings(tmp_path / "nope.toml")

def test_viewloader_toml(tmp_path: Path, monkeypatch):
    (tmp_path / "viewloader.toml").write_text(
        'paths = ["app/views", "/abs/framework/views"]\n'
        'delimiters = "[[ ]]"\n'
        'exclude_patterns = ["*.bak"]\n'
        'date_format = "%d.%m.%Y"\n'
    )
    monkeypatch.chdir(tmp_path)
    settings = load_settings()
    assert settings.paths == [tmp_path.resolve() / "app" / "views", Path("/abs/framework/views")]
    assert settings.delimiters == "[[ ]]"
    assert settings.exclude_patterns == ["*.bak"]
    assert settings.date_format == "%d.%m.%Y"

def test_paths_are_relative_to_config_file(tmp_path: Path, monkeypatch):
    conf_dir = tmp_path / "conf"
    conf_dir.mkdir()
    config = conf_dir / "site.toml"
    config.write_text('template_paths = "views"\n')
    monkeypatch.chdir(tmp_path)
    settings = load_settings(config)
    assert settings.paths == [conf_dir.resolve() / "views"]

def test_pyproject_tool_table(tmp_path: Path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "site"\n\n'
        '[tool.viewloader]\npaths = ["views"]\ndelimiters = ["<%", "%>"]\n'
    )
    monkeypatch.chdir(tmp_path)
    assert find_config_file().name == "pyproject.toml"
    settings = load_settings()
    assert settings.paths == [tmp_path.resolve() / "views"]
    assert settings.delimiters == "<% %>"

def test_pyproject_without_tool_table_is_ignored(tmp_path: Path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "site"\n')
    monkeypatch.chdir(tmp_path)
    assert find_config_file() is None

def test_viewloader_toml_wins_over_pyproject(tmp_path: Path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text('[tool.viewloader]\npaths = ["from_pyproject"]\n')
    (tmp_path / "viewloader.toml").write_text('paths = ["from_viewloader"]\n')
    monkeypatch.chdir(tmp_path)
    assert load_settings().paths == [tmp_path.resolve() / "from_viewloader"]

def test_malformed_delimiters_in_config(tmp_path: Path):
    config = tmp_path / "viewloader.toml"
    config.write_text('delimiters = "[[]]"\n')
    with pytest.raises(ConfigError):
        load_settings(config)

def test_invalid_toml(tmp_path: Path):
    config = tmp_path / "viewloader.toml"
    config.write_text("paths = [unterminated\n")
    with pytest.raises(ConfigError, match="Could not read config file"):
        load_settings(config)

def test_unknown_keys_are_ignored(tmp_path: Path):
    config = tmp_path / "viewloader.toml"
    config.write_text('paths = ["views"]\nflavour = "vanilla"\n')
    settings = load_settings(config)
    assert not hasattr(settings, "flavour")
    assert len(settings.paths) == 1
