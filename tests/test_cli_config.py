"""Tests for CLI configuration module."""

import json

from cli.config import Config
from common.constants import DEFAULT_CHUNK_SIZE


def test_config_creates_default_file(tmp_path, monkeypatch):
    """Test that config file is created with defaults if missing."""
    monkeypatch.delenv("FILEHEAP_ADDRESS", raising=False)
    monkeypatch.delenv("FILEHEAP_TIMEOUT", raising=False)
    config_path = tmp_path / '.fileheap' / 'config.json'
    config = Config(config_path)

    assert config_path.exists()
    assert config.data['address'] == 'http://localhost:8000'
    assert config.data['timeout'] == 30.0
    assert config.data['chunk_size'] == DEFAULT_CHUNK_SIZE

    with open(config_path) as f:
        assert json.load(f) == config.data


def test_config_defaults_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("FILEHEAP_ADDRESS", "https://heap.example.com")
    monkeypatch.setenv("FILEHEAP_TIMEOUT", "5")

    config = Config(tmp_path / 'config.json')

    assert config.get_address() == "https://heap.example.com"
    assert config.get_timeout() == 5.0


def test_config_loads_existing_file(tmp_path):
    """Test loading existing config file."""
    config_path = tmp_path / '.fileheap' / 'config.json'
    config_path.parent.mkdir(parents=True)
    with open(config_path, 'w') as f:
        json.dump({'address': 'http://heap.internal:9000', 'chunk_size': 1024}, f)

    config = Config(config_path)

    assert config.get_address() == 'http://heap.internal:9000'
    assert config.get_chunk_size() == 1024
    assert 'timeout' in config.data


def test_config_invalid_json_is_backed_up(tmp_path, monkeypatch):
    monkeypatch.delenv("FILEHEAP_ADDRESS", raising=False)
    config_path = tmp_path / 'config.json'
    config_path.write_text('{not json')

    config = Config(config_path)

    assert config.get_address() == 'http://localhost:8000'
    assert config_path.with_suffix('.json.bak').read_text() == '{not json'


def test_set_address_persists(temp_config):
    temp_config.set_address('http://other:8000')

    reloaded = Config(temp_config.config_path)
    assert reloaded.get_address() == 'http://other:8000'
