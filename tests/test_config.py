import pytest
from tree_mirror.config.config_manager import ConfigManager
from tree_mirror.config.config_validator import ConfigValidator


class TestConfigManager:
    """Loading configuration files"""

    def test_no_config_file_uses_defaults(self):
        manager = ConfigManager()
        config = manager.load_config()

        assert manager.config_file is None
        assert config["mirror"]["threshold_seconds"] == 10
        assert config["mirror"]["workers"] == 1
        assert config["mirror"]["path_overflow"] == "truncate"
        assert config["logging"]["log_dir"] == "logs"
        assert config["paths"]["default_paths_file"] == "default.txt"

    def test_explicit_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager(str(tmp_path / "missing.yaml")).load_config()

    def test_values_override_defaults(self, write_config):
        path = write_config({"paths": {"source": "/src", "destination": "/dst"},
                             "mirror": {"threshold_seconds": 30}})
        manager = ConfigManager(path)
        manager.load_config()

        assert manager.get_paths_config()["source"] == "/src"
        assert manager.get_mirror_config()["threshold_seconds"] == 30
        assert manager.get_mirror_config()["chunk_size_kb"] == 1024

    def test_found_in_default_location(self, monkeypatch, write_config):
        path = write_config({"mirror": {"workers": 2}}, name="config.yml")
        monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_LOCATIONS", ["config.yaml", path])
        manager = ConfigManager()
        manager.load_config()

        assert manager.config_file == path
        assert manager.get_mirror_config()["workers"] == 2

    def test_empty_file_is_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        config = ConfigManager(str(path)).load_config()
        assert config["mirror"]["threshold_seconds"] == 10

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("mirror: [unclosed")
        with pytest.raises(ValueError, match="Invalid YAML"):
            ConfigManager(str(path)).load_config()

    def test_invalid_value(self, write_config):
        path = write_config({"mirror": {"path_overflow": "wrap"}})
        with pytest.raises(ValueError, match="path_overflow"):
            ConfigManager(path).load_config()


class TestDefaultPathsFile:
    """Legacy one-line source,destination file"""

    def make_manager(self, write_config, paths_file):
        manager = ConfigManager(write_config({"paths": {"default_paths_file": str(paths_file)}}))
        manager.load_config()
        return manager

    def test_both_paths_exist(self, tmp_path, write_config):
        (tmp_path / "src").mkdir()
        (tmp_path / "dst").mkdir()
        paths_file = tmp_path / "default.txt"
        paths_file.write_text(f"{tmp_path / 'src'},{tmp_path / 'dst'}\r\n")

        manager = self.make_manager(write_config, paths_file)
        assert manager.load_default_paths() == (str(tmp_path / "src"), str(tmp_path / "dst"))

    def test_missing_destination_ignored(self, tmp_path, write_config):
        (tmp_path / "src").mkdir()
        paths_file = tmp_path / "default.txt"
        paths_file.write_text(f"{tmp_path / 'src'},{tmp_path / 'gone'}\n")

        assert self.make_manager(write_config, paths_file).load_default_paths() is None

    def test_no_comma_ignored(self, tmp_path, write_config):
        paths_file = tmp_path / "default.txt"
        paths_file.write_text(str(tmp_path))

        assert self.make_manager(write_config, paths_file).load_default_paths() is None

    def test_no_file(self, tmp_path, write_config):
        assert self.make_manager(write_config, tmp_path / "absent.txt").load_default_paths() is None


class TestConfigValidator:
    """Validation of individual settings"""

    @pytest.fixture
    def validator(self):
        return ConfigValidator()

    def test_empty_config_valid(self, validator):
        validator.validate({})

    def test_section_must_be_mapping(self, validator):
        with pytest.raises(ValueError, match="mirror"):
            validator.validate({"mirror": [1, 2]})

    def test_config_must_be_mapping(self, validator):
        with pytest.raises(ValueError):
            validator.validate(["paths"])

    @pytest.mark.parametrize("key,value", [
        ("threshold_seconds", -1),
        ("threshold_seconds", "ten"),
        ("chunk_size_kb", 0),
        ("max_path_length", 2.5),
        ("workers", 0),
        ("workers", True),
    ])
    def test_invalid_mirror_values(self, validator, key, value):
        with pytest.raises(ValueError):
            validator.validate({"mirror": {key: value}})

    def test_fractional_threshold_allowed(self, validator):
        validator.validate({"mirror": {"threshold_seconds": 2.5}})

    def test_invalid_log_level(self, validator):
        with pytest.raises(ValueError, match="log level"):
            validator.validate({"logging": {"level": "LOUD"}})

    def test_empty_path_rejected(self, validator):
        with pytest.raises(ValueError):
            validator.validate({"paths": {"source": ""}})
