import pytest
from pathlib import Path
from click.testing import CliRunner

from viewloader import __version__
from viewloader.cli.interface import main_cli_group

@pytest.fixture
def views_dir(tmp_path: Path):
    """Creates a template root with one page, one partial and one handlebars card."""
    views = tmp_path / "views"
    (views / "App").mkdir(parents=True)
    (views / "hello.html").write_text("Hello {{ name }}!")
    (views / "App" / "Index.html").write_text("{% include \"hello.html\" %} from {{ place|default('home') }}")
    (views / "card.hbs").write_text("[{{title}}]")
    return views

@pytest.fixture
def broken_views_dir(tmp_path: Path):
    views = tmp_path / "broken"
    views.mkdir()
    (views / "Broken.html").write_text("one\ntwo\n{% endif %}\nfour\n")
    (views / "fine.html").write_text("fine")
    return views

def test_version():
    result = CliRunner().invoke(main_cli_group, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output

def test_check_clean_tree(views_dir: Path):
    result = CliRunner().invoke(main_cli_group, ["check", str(views_dir)])
    assert result.exit_code == 0, result.output
    # 3 real names plus the app/index.html alias
    assert "Compiled templates: 4" in result.output

def test_check_reports_first_error(broken_views_dir: Path):
    result = CliRunner().invoke(main_cli_group, ["check", str(broken_views_dir)])
    assert result.exit_code == 1
    assert "Template Compilation Error" in result.output
    assert "Broken.html:3" in result.output
    assert "{% endif %}" in result.output

def test_check_malformed_delimiters(views_dir: Path):
    result = CliRunner().invoke(main_cli_group, ["check", str(views_dir), "--delims", "[[]]"])
    assert result.exit_code == 2
    assert "Incorrect format for template delimiters" in result.output

def test_check_without_roots_is_a_usage_error(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(main_cli_group, ["check"])
    assert result.exit_code == 2
    assert "No template roots" in result.output

def test_render(views_dir: Path):
    result = CliRunner().invoke(main_cli_group, ["render", "hello.html", str(views_dir), "--var", "name=World"])
    assert result.exit_code == 0, result.output
    assert "Hello World!" in result.output

def test_render_is_case_insensitive_and_follows_includes(views_dir: Path):
    result = CliRunner().invoke(
        main_cli_group,
        ["render", "APP/INDEX.HTML", str(views_dir), "--var", "name=Ann", "--var", "place=Oslo"],
    )
    assert result.exit_code == 0, result.output
    assert "Hello Ann! from Oslo" in result.output

def test_render_handlebars(views_dir: Path):
    result = CliRunner().invoke(main_cli_group, ["render", "card.hbs", str(views_dir), "--var", "title=Ace"])
    assert result.exit_code == 0, result.output
    assert "[Ace]" in result.output

def test_render_with_custom_delimiters(tmp_path: Path):
    (tmp_path / "page.html").write_text("Hi [[ who ]] {{ who }}")
    result = CliRunner().invoke(
        main_cli_group,
        ["render", "page.html", str(tmp_path), "--delims", "[[ ]]", "--var", "who=Bo"],
    )
    assert result.exit_code == 0, result.output
    assert "Hi Bo {{ who }}" in result.output

def test_render_missing_template(views_dir: Path):
    result = CliRunner().invoke(main_cli_group, ["render", "nope.html", str(views_dir)])
    assert result.exit_code == 1
    assert "Template nope.html not found." in result.output

def test_render_missing_template_reports_build_error(broken_views_dir: Path):
    result = CliRunner().invoke(main_cli_group, ["render", "nope.html", str(broken_views_dir)])
    assert result.exit_code == 1
    assert "Template Compilation Error" in result.output
    assert "Broken.html:3" in result.output

def test_render_bad_var(views_dir: Path):
    result = CliRunner().invoke(main_cli_group, ["render", "hello.html", str(views_dir), "--var", "name"])
    assert result.exit_code == 2
    assert "expected key=value" in result.output

def test_list(views_dir: Path):
    result = CliRunner().invoke(main_cli_group, ["list", str(views_dir)])
    assert result.exit_code == 0, result.output
    assert "Templates" in result.output
    assert "app/index.html" in result.output
    assert "handlebars" in result.output
    assert "jinja" in result.output

def test_config_file_supplies_roots(views_dir: Path, tmp_path: Path):
    config = tmp_path / "viewloader.toml"
    config.write_text('paths = ["views"]\nexclude_patterns = ["*.hbs"]\n')
    result = CliRunner().invoke(main_cli_group, ["list", "--config", str(config)])
    assert result.exit_code == 0, result.output
    assert "hello.html" in result.output
    assert "card.hbs" not in result.output

def test_check_delimiters_clashing_with_statements(views_dir: Path):
    result = CliRunner().invoke(main_cli_group, ["check", str(views_dir), "--delims", "{% %}"])
    assert result.exit_code == 2
    assert "collide" in result.output
