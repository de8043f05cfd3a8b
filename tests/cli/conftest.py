# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Shared fixtures for CLI tests."""

import pytest
from click.testing import CliRunner

from linear_tasks.classes import ShortIssue


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config file at a temp dir and drop LINEAR_* variables."""
    config_dir = tmp_path / '.lintask'
    monkeypatch.setattr('linear_tasks.cli.config_commands.LINTASK_DIR', config_dir)
    monkeypatch.setattr('linear_tasks.cli.config_commands.CONFIG_FILE', config_dir / 'config.json')
    monkeypatch.setattr('linear_tasks.cli.main.load_dotenv', lambda *args, **kwargs: False)
    for name in ('LINEAR_API_KEY', 'LINEAR_TEAM_KEY', 'LINEAR_API_URL'):
        monkeypatch.delenv(name, raising=False)
    return config_dir / 'config.json'


@pytest.fixture
def cli_root():
    from linear_tasks.cli.main import cli

    return cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setenv('LINEAR_API_KEY', 'lin_api_test_key')
    monkeypatch.setenv('LINEAR_TEAM_KEY', 'ENG')


@pytest.fixture
def sample_issues():
    return [
        ShortIssue(
            id='issue-1',
            identifier='ENG-1',
            title='Crash on login',
            updated_at='2026-02-01T10:00:00.000Z',
            state_name='In Progress',
            state_type='started',
        ),
        ShortIssue(
            id='issue-2',
            identifier='ENG-2',
            title='Add dark mode',
            updated_at='2026-01-28T08:30:00.000Z',
            state_name='Todo',
            state_type='unstarted',
        ),
    ]
