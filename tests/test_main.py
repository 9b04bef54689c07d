"""Tests for the command line entry point."""
import json
import logging

from main import main


def test_check_prints_redacted_config(write_config, tmp_path, capsys):
    path = write_config("configured: true\ndatabase_password: hunter2\n")
    assert main(['--config', str(path), '--check', '--log-file', str(tmp_path / 'test.log')]) == 0

    printed = json.loads(capsys.readouterr().out)
    assert printed['configured'] is True
    assert printed['database_password'] == '********'


def test_unconfigured_refuses_to_start(write_config, tmp_path, caplog):
    path = write_config("database_host: db.example.org\n")
    with caplog.at_level(logging.ERROR):
        assert main(['--config', str(path), '--check', '--log-file', str(tmp_path / 'test.log')]) == 1
    assert "'configured'" in caplog.text


def test_invalid_value_refuses_to_start(write_config, tmp_path, caplog):
    path = write_config("configured: true\ntransport_default: bogus\n")
    with caplog.at_level(logging.ERROR):
        assert main(['--config', str(path), '--log-file', str(tmp_path / 'test.log')]) == 1
    assert 'transport_default' in caplog.text
