"""Tests for reading settings from YAML and JSON files."""
import pytest

from config import load
from config_file import read_file, read_source
from errors import ConfigurationError, InvalidValueError


def test_yaml_file(write_config):
    path = write_config("""
        configured: true
        database_type: pgsql
        database_host: db.example.org
        quota: YES
        vacation: "YES"
        transport_options:
          - virtual
          - relay
        database_tables:
          mailbox: users
    """)
    config = load(path)
    assert config.get('database_type') == 'pgsql'
    assert config.get('quota') is True
    assert config.get('vacation') is True
    assert config.get('transport_options') == ('virtual', 'relay')
    assert config.table('mailbox') == 'users'
    assert config.source == str(path)


def test_string_path(write_config):
    path = write_config("configured: true\n")
    assert load(str(path)).configured


def test_json_file(write_config):
    path = write_config('{"configured": true, "page_size": "20"}', name='config.json')
    assert load(path).get('page_size') == 20


def test_env_var_names_the_file(write_config, monkeypatch):
    path = write_config("configured: true\nsmtp_server: mx.example.org\n")
    monkeypatch.setenv('MAILADMIN_CONFIG', str(path))
    assert load().get('smtp_server') == 'mx.example.org'


def test_env_var_unset_means_no_overrides():
    assert read_source() == {}


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load(tmp_path / 'nope.yaml')


def test_unsupported_format(write_config):
    path = write_config("configured = true\n", name='config.ini')
    with pytest.raises(ConfigurationError):
        read_file(path)


def test_empty_file_is_no_overrides(write_config):
    path = write_config("")
    assert read_file(path) == {}
    with pytest.raises(ConfigurationError):
        load(path)


def test_top_level_must_be_mapping(write_config):
    path = write_config("- configured\n- true\n")
    with pytest.raises(ConfigurationError):
        read_file(path)


def test_malformed_yaml(write_config):
    path = write_config("configured: [true\n")
    with pytest.raises(ConfigurationError):
        read_file(path)


def test_yaml_values_are_validated(write_config):
    path = write_config("configured: true\nquota: maybe\n")
    with pytest.raises(InvalidValueError):
        load(path)


def test_mapping_source_is_copied():
    source = {'configured': True}
    overrides = read_source(source)
    overrides['quota'] = 'YES'
    assert 'quota' not in source
