import pytest

from tank.config import load_config
from tank.exceptions import ConfigError
from tests.helpers import write


class TestLoadConfig:

    def test_yaml_mapping(self, tmp_path):
        cfg = write(tmp_path / "vars.yaml", """
            title: Welcome
            count: 3
            enabled: true
            empty:
        """)
        assert load_config(cfg) == {"title": "Welcome", "count": "3", "enabled": "true", "empty": ""}

    def test_json_file(self, tmp_path):
        cfg = write(tmp_path / "vars.json", '{"title": "Welcome", "items": "apples"}\n')
        assert load_config(cfg) == {"title": "Welcome", "items": "apples"}

    def test_empty_file(self, tmp_path):
        cfg = tmp_path / "vars.yaml"
        cfg.write_text("")
        assert load_config(cfg) == {}

    def test_not_a_mapping(self, tmp_path):
        cfg = write(tmp_path / "vars.yaml", "- one\n- two\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config(cfg)

    def test_nested_value(self, tmp_path):
        cfg = write(tmp_path / "vars.yaml", "menu:\n  - home\n")
        with pytest.raises(ConfigError, match="'menu' must be a single value"):
            load_config(cfg)

    def test_invalid_yaml(self, tmp_path):
        cfg = write(tmp_path / "vars.yaml", "title: [unclosed\n")
        with pytest.raises(ConfigError, match="Failed to read config file"):
            load_config(cfg)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Failed to open config file"):
            load_config(tmp_path / "nope.yaml")
