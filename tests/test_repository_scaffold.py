from pathlib import Path


def test_core_directories_present():
    root = Path(__file__).resolve().parents[1]
    for rel in [
        "core/domain",
        "core/application",
        "ports",
        "adapters/secondary/memory",
        "adapters/secondary/filesystem",
        "config",
    ]:
        assert (root / rel).is_dir(), f"Expected directory '{rel}' to exist"


def test_packaging_metadata_present():
    root = Path(__file__).resolve().parents[1]
    pyproject = root / "pyproject.toml"
    assert pyproject.is_file(), "Project must be installable"
    content = pyproject.read_text(encoding="utf-8")
    assert 'name = "textchain-hex"' in content
    assert "pandas" in content
