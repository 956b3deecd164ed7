import logging
import pytest
import yaml
from tree_mirror.config.config_manager import ConfigManager


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep tests away from config files and log folders of the real machine"""
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_LOCATIONS", [])
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The CLI replaces root handlers; put the originals back afterwards"""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def write_config(tmp_path):
    """Write a YAML config file and return its path"""
    def _write(data, name="config.yaml"):
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return str(path)
    return _write
