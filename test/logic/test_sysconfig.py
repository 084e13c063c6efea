import json

import pytest

import painlab_nidaq.system.sysconfig as sysconfig
from painlab_nidaq.system import (
    CHANNEL_CONFIG_FILE,
    CONFIG_FILES,
    DESCRIPTOR_FILE,
    NETWORK_CONFIG_FILE,
    install_default_config,
    load_channel_config,
    load_descriptor,
    load_device_config,
    load_network_config,
)
from painlab_nidaq.types import ConfigError, SwitchChannelMethod


@pytest.fixture()
def user_dir(tmp_path, monkeypatch):
    d = tmp_path / "user"
    d.mkdir()
    monkeypatch.setattr(sysconfig, "USER_CONFIG_DIR", d)
    return d


def write_json(path, d):
    path.write_text(json.dumps(d), encoding="utf-8")


class TestLookup:
    def test_package_defaults(self, user_dir):
        cfg = load_device_config()
        assert cfg.channel.device_name == "Dev1"
        assert cfg.channel.switch_channel_method == SwitchChannelMethod.SINGLE
        assert cfg.channel.samples_per_frame == 10
        assert cfg.network.endpoint == "tcp://127.0.0.1:8124"
        json.loads(cfg.descriptor)
        for name in CONFIG_FILES:
            assert cfg.sources[name].parent == sysconfig.package_config_dir()

    def test_user_dir_overrides_package(self, user_dir):
        write_json(user_dir / NETWORK_CONFIG_FILE, {"host": "10.0.0.2", "port": 9000})
        assert load_network_config().endpoint == "tcp://10.0.0.2:9000"
        assert load_channel_config().device_name == "Dev1"

    def test_explicit_dir_wins(self, user_dir, tmp_path):
        explicit = tmp_path / "explicit"
        explicit.mkdir()
        write_json(user_dir / CHANNEL_CONFIG_FILE, {"device_name": "DevUser"})
        write_json(
            explicit / CHANNEL_CONFIG_FILE,
            {"device_name": "Dev7", "switch_channel_method": "dual"},
        )
        cfg = load_channel_config(explicit)
        assert cfg.device_name == "Dev7"
        assert cfg.is_dual
        assert cfg.input_channels == "Dev7/ai0:3"
        assert cfg.switch_line_channels == "Dev7/port0/line0:1"

    def test_missing_everywhere(self, user_dir, monkeypatch, tmp_path):
        monkeypatch.setattr(sysconfig, "package_config_dir", lambda: tmp_path / "none")
        with pytest.raises(ConfigError):
            load_channel_config()


class TestValidation:
    def test_invalid_json(self, user_dir):
        (user_dir / CHANNEL_CONFIG_FILE).write_text("{nope", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_channel_config()

    def test_invalid_values(self, user_dir):
        write_json(user_dir / CHANNEL_CONFIG_FILE, {"device_name": "Dev1", "max_volt": -1})
        with pytest.raises(ConfigError):
            load_channel_config()

    def test_unknown_method(self, user_dir):
        write_json(
            user_dir / CHANNEL_CONFIG_FILE,
            {"device_name": "Dev1", "switch_channel_method": "triple"},
        )
        with pytest.raises(ConfigError):
            load_channel_config()

    def test_descriptor_must_be_json(self, user_dir):
        (user_dir / DESCRIPTOR_FILE).write_bytes(b"descriptor?")
        with pytest.raises(ConfigError):
            load_descriptor()

    def test_descriptor_sent_verbatim(self, user_dir):
        blob = b'{ "name" : "x" }\n'
        (user_dir / DESCRIPTOR_FILE).write_bytes(blob)
        assert load_descriptor() == blob


class TestInstall:
    def test_install_and_keep(self, user_dir):
        written = install_default_config()
        assert sorted(p.name for p in written) == sorted(CONFIG_FILES)
        write_json(user_dir / NETWORK_CONFIG_FILE, {"port": 1})
        assert install_default_config() == []
        assert load_network_config().port == 1

    def test_overwrite(self, user_dir):
        write_json(user_dir / NETWORK_CONFIG_FILE, {"port": 1})
        written = install_default_config(overwrite=True)
        assert len(written) == len(CONFIG_FILES)
        assert load_network_config().port == 8124

    def test_custom_dest(self, user_dir, tmp_path):
        dest = tmp_path / "a" / "b"
        install_default_config(dest)
        assert all((dest / name).is_file() for name in CONFIG_FILES)
