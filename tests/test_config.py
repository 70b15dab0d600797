import tempfile
from pathlib import Path
from unittest.mock import patch

from todo_md.config import DEFAULT_TODO_FILE, ConfigManager, TodoSettings
from todo_md.paths import expand_home


def test_config_manager_creation():
    """ConfigManager creates its XDG directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch.dict("os.environ", {"XDG_CONFIG_HOME": tmpdir}):
            config = ConfigManager("test-app")
            assert config.config_file_path.parent.exists()
            assert config.config_file_path.parent.name == "test-app"


def test_config_persistence_and_update():
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch.dict("os.environ", {"XDG_CONFIG_HOME": tmpdir}):
            config1 = ConfigManager("test-app")
            assert config1.get("nonexistent", "default") == "default"
            config1.set("todoFile", "/tmp/a.md")
            config1.update({"maxListItems": 5, "sectionHeader": "# TODO"})

            config2 = ConfigManager("test-app")
            assert config2.get_all() == {
                "todoFile": "/tmp/a.md",
                "maxListItems": 5,
                "sectionHeader": "# TODO",
            }


def test_settings_defaults():
    settings = TodoSettings()
    assert settings.enabled is True
    assert settings.todo_file == DEFAULT_TODO_FILE
    assert settings.brain_log is True
    assert settings.max_list_items == 30
    assert settings.section_header is None
    assert settings.todo_path == Path(expand_home(DEFAULT_TODO_FILE))


def test_settings_read_camel_case_config(tmp_path):
    config = ConfigManager("test-app")
    config.update({"todoFile": str(tmp_path / "T.md"), "brainLog": False, "maxListItems": 3})

    settings = config.todo_settings()
    assert settings.todo_path == tmp_path / "T.md"
    assert settings.brain_log is False
    assert settings.max_list_items == 3


def test_env_and_overrides_take_precedence(tmp_path, monkeypatch):
    config = ConfigManager("test-app")
    config.update({"todoFile": "/from/config.md", "sectionHeader": "# Config"})
    monkeypatch.setenv("TODO_MD_FILE", "/from/env.md")

    settings = config.todo_settings(section_header="# Cli", brain_log=None)
    assert settings.todo_file == "/from/env.md"
    assert settings.section_header == "# Cli"
    assert settings.brain_log is True

    settings = config.todo_settings(todo_file="/from/cli.md")
    assert settings.todo_file == "/from/cli.md"


def test_invalid_settings_fall_back_to_defaults(tmp_path):
    config = ConfigManager("test-app")
    config.set("maxListItems", 0)
    settings = config.todo_settings(section_header="# Kept")
    assert settings.max_list_items == 30
    assert settings.section_header == "# Kept"


def test_unreadable_config_file_is_ignored(tmp_path):
    config = ConfigManager("test-app")
    config.config_file_path.write_text("{not json", encoding="utf-8")
    assert ConfigManager("test-app").get_all() == {}


def test_non_object_config_file_is_ignored(tmp_path):
    config = ConfigManager("test-app")
    for payload in ('"just a string"', "[1, 2]", "42"):
        config.config_file_path.write_text(payload, encoding="utf-8")
        reloaded = ConfigManager("test-app")
        assert reloaded.get_all() == {}
        settings = reloaded.todo_settings(todo_file=str(tmp_path / "T.md"))
        assert settings.todo_file == str(tmp_path / "T.md")
        assert settings.max_list_items == 30
