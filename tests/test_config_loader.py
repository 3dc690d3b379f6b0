import json

import pytest

from pytoolbox.config import loader
from pytoolbox.config.loader import load_toolbox_config
from pytoolbox.config.models import ToolboxConfig


@pytest.fixture(autouse=True)
def isolated_global_config(tmp_path, monkeypatch):
    global_dir = tmp_path / "global"
    global_dir.mkdir()
    monkeypatch.setattr(loader, "user_config_dir", lambda app_name: str(global_dir))
    return global_dir


def test_defaults_without_files(project_dir):
    cfg = load_toolbox_config(cwd=project_dir)
    assert cfg.amp_binary == "amp"
    assert cfg.tmux_binary == "tmux"
    assert cfg.tmux_socket == "amp"
    assert cfg.send_keys_delay == 0.1
    assert cfg.loaded_from is None


def test_project_overrides_global(project_dir, isolated_global_config):
    (isolated_global_config / "pytoolbox.json").write_text(
        json.dumps({"tmux_socket": "global", "amp_binary": "/opt/amp"}), encoding="utf-8"
    )
    (project_dir / ".pytoolbox.json").write_text(json.dumps({"tmux_socket": "proj"}), encoding="utf-8")

    cfg = load_toolbox_config(cwd=project_dir)

    assert cfg.tmux_socket == "proj"
    assert cfg.amp_binary == "/opt/amp"
    assert cfg.loaded_from == project_dir / ".pytoolbox.json"


def test_yaml_project_config(project_dir):
    (project_dir / "pytoolbox.yaml").write_text("tmux_binary: /usr/local/bin/tmux\nsend_keys_delay: 0.25\n", encoding="utf-8")
    cfg = load_toolbox_config(cwd=project_dir)
    assert cfg.tmux_binary == "/usr/local/bin/tmux"
    assert cfg.send_keys_delay == 0.25


def test_explicit_path_wins(project_dir, tmp_path):
    (project_dir / ".pytoolbox.json").write_text(json.dumps({"tmux_socket": "proj"}), encoding="utf-8")
    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("tmux_socket: explicit\n", encoding="utf-8")

    cfg = load_toolbox_config(cwd=project_dir, explicit_path=explicit)

    assert cfg.tmux_socket == "explicit"
    assert cfg.loaded_from == explicit.resolve()


def test_missing_explicit_path_raises(project_dir, tmp_path):
    with pytest.raises(FileNotFoundError):
        load_toolbox_config(cwd=project_dir, explicit_path=tmp_path / "nope.json")


def test_unreadable_project_file_is_skipped(project_dir):
    (project_dir / ".pytoolbox.json").write_text("{broken", encoding="utf-8")
    (project_dir / "pytoolbox.json").write_text(json.dumps({"tmux_socket": "second"}), encoding="utf-8")
    cfg = load_toolbox_config(cwd=project_dir)
    assert cfg.tmux_socket == "second"


@pytest.mark.parametrize(
    "obj",
    [
        {"send_keys_delay": -1},
        {"send_keys_delay": True},
        {"send_keys_delay": "fast"},
        {"tmux_socket": "   "},
        {"amp_binary": 7},
        ["not", "a", "mapping"],
    ],
)
def test_invalid_values_fall_back_to_defaults(obj):
    assert ToolboxConfig.from_obj(obj) == ToolboxConfig()
