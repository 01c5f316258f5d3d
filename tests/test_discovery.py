import pytest
from pathlib import Path

from viewloader.core.discovery import discover_templates, resolve_template_roots
from viewloader.core.discovery.pattern_matching import (
    compile_glob_patterns_to_spec,
    is_excluded,
    watch_dir,
    watch_file,
)
from viewloader.exceptions import DiscoveryError

@pytest.fixture
def template_tree(tmp_path: Path):
    """Creates a views directory with nested, hidden and excluded entries."""
    root = tmp_path / "views"
    (root / "App").mkdir(parents=True)
    (root / "App" / "partials").mkdir()
    (root / ".svn").mkdir()
    (root / "node_modules").mkdir()

    (root / "layout.html").write_text("layout")
    (root / "App" / "Index.html").write_text("index")
    (root / "App" / "partials" / "nav.hbs").write_text("nav")
    (root / "App" / ".Index.html.swp").write_text("swap")
    (root / ".svn" / "entries.html").write_text("svn")
    (root / "node_modules" / "lib.js").write_text("lib")
    (root / "README").write_text("no extension")

    return root

def test_discover_templates_yields_logical_names(template_tree: Path):
    found = dict(discover_templates(template_tree))
    assert set(found) == {
        "layout.html",
        "README",
        "node_modules/lib.js",
        "App/Index.html",
        "App/partials/nav.hbs",
    }
    assert Path(found["App/Index.html"]) == template_tree / "App" / "Index.html"

def test_discover_templates_order_is_repeatable(template_tree: Path):
    first = [name for name, _ in discover_templates(template_tree)]
    second = [name for name, _ in discover_templates(template_tree)]
    assert first == second
    # files of a directory come before its subdirectories, each sorted
    assert first.index("README") < first.index("layout.html") < first.index("App/Index.html")

def test_discover_templates_with_exclude_spec(template_tree: Path):
    spec = compile_glob_patterns_to_spec(["node_modules/", "*.hbs"])
    names = {name for name, _ in discover_templates(template_tree, exclude_spec=spec)}
    assert "node_modules/lib.js" not in names
    assert "App/partials/nav.hbs" not in names
    assert "App/Index.html" in names

def test_custom_hidden_prefix(template_tree: Path):
    (template_tree / "_drafts").mkdir()
    (template_tree / "_drafts" / "wip.html").write_text("wip")
    names = {name for name, _ in discover_templates(template_tree, hidden_prefix="_")}
    assert "_drafts/wip.html" not in names
    # with "_" as the prefix, dot entries are ordinary templates
    assert ".svn/entries.html" in names

def test_empty_hidden_prefix_hides_nothing():
    assert watch_dir(".git", "")
    assert watch_file(".swp", "")
    assert not watch_dir(".git")
    assert not watch_file(".Index.html.swp")
    assert watch_file("Index.html")

def test_is_excluded_without_spec():
    assert compile_glob_patterns_to_spec([]) is None
    assert not is_excluded("anything.html", None)

def test_invalid_pattern_raises_discovery_error():
    with pytest.raises(DiscoveryError):
        compile_glob_patterns_to_spec(["*.html", 42])

def test_resolve_template_roots_skips_missing_and_files(tmp_path: Path):
    real = tmp_path / "views"
    real.mkdir()
    a_file = tmp_path / "notes.txt"
    a_file.write_text("not a directory")

    roots = resolve_template_roots([tmp_path / "missing", a_file, real, str(real)])
    assert roots == [real.resolve()]

def test_resolve_template_roots_keeps_priority_order(tmp_path: Path):
    app, framework = tmp_path / "app", tmp_path / "framework"
    app.mkdir()
    framework.mkdir()
    assert resolve_template_roots([framework, app]) == [framework.resolve(), app.resolve()]
    assert resolve_template_roots([]) == []
