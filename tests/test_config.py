# tests/test_config.py

import yaml

from onelook.core.config import DEFAULT_CONFIG, Config


def test_missing_config_file_is_created_with_defaults(tmp_path):
    path = tmp_path / "nested" / "config.yaml"
    config = Config(config_path=str(path))
    assert path.exists()
    written = yaml.safe_load(path.read_text())
    assert written["storage"]["path"] == str(tmp_path / "nested" / "onelook.db")
    assert config.data["storage"]["backend"] == "sqlite"
    assert config.data["view"]["next7_only"] is True
    assert config.data["urgency"] == {"critical_days": 1, "warning_days": 3}


def test_partial_config_is_merged_with_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"storage": {"backend": "memory"}, "view": {"next7_only": False}}))
    config = Config(config_path=str(path))
    assert config.get_section("storage")["backend"] == "memory"
    assert config.get_section("storage")["key"] == "assignments_v1"
    assert config.get_section("view") == {"next7_only": False, "source": "All"}
    assert config.get_section("api")["port"] == 8765


def test_non_mapping_config_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    config = Config(config_path=str(path))
    assert config.data == DEFAULT_CONFIG


def test_reload_keeps_previous_config_when_file_breaks(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"storage": {"backend": "file"}}))
    config = Config(config_path=str(path))
    path.write_text("storage: [unclosed")
    config.reload()
    assert config.get_section("storage")["backend"] == "file"


def test_env_substitution_and_dotenv(tmp_path, monkeypatch):
    monkeypatch.setenv("ONELOOK_TEST_KEY", "")
    monkeypatch.delenv("ONELOOK_TEST_KEY")
    monkeypatch.setenv("ONELOOK_TEST_LEVEL", "DEBUG")
    (tmp_path / ".env").write_text("# comment\nONELOOK_TEST_KEY='from_dotenv'\nONELOOK_TEST_LEVEL=ERROR\n")
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({
        "storage": {"key": "${ONELOOK_TEST_KEY}"},
        "logging": {"level": "$ONELOOK_TEST_LEVEL"},
        "api": {"host": "${ONELOOK_UNSET_VAR}"},
    }))
    config = Config(config_path=str(path))

    assert config.data["storage"]["key"] == "from_dotenv"
    # Existing environment wins over .env
    assert config.data["logging"]["level"] == "DEBUG"
    assert config.data["api"]["host"] == "${ONELOOK_UNSET_VAR}"


def test_reload_notifies_callbacks(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"logging": {"level": "WARNING"}}))
    config = Config(config_path=str(path))
    seen = []
    config.register_change_callback(seen.append)

    path.write_text(yaml.safe_dump({"logging": {"level": "DEBUG"}}))
    config.reload()

    assert len(seen) == 1
    assert seen[0]["logging"]["level"] == "DEBUG"


def test_watching_can_start_and_stop(tmp_path):
    config = Config(config_path=str(tmp_path / "config.yaml"), watch=True)
    assert config.observer is not None
    config.cleanup()
    assert config.observer is None
