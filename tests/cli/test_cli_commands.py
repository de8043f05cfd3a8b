# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Tests for the lintask CLI.

Covers:
    - config show/set/clear and environment precedence
    - issues, states, set-state and test commands wired to the data source
    - failure reporting and exit codes
"""

import json
from unittest.mock import AsyncMock, Mock, patch

import pytest

from linear_tasks.classes import TaskState
from linear_tasks.cli.config_commands import get_config_value
from linear_tasks.constants import LINEAR_API_URL


def _mock_data_source(issues=None, states=None):
    data_source = Mock()
    data_source.get_team_id_by_key = AsyncMock(return_value='team-eng')
    data_source.test_connection = AsyncMock(return_value=None)
    data_source.get_issues = Mock(return_value=issues or [])
    data_source.get_available_task_states = AsyncMock(return_value=states or set())
    data_source.set_task_state = AsyncMock(return_value=None)
    return data_source


# =============================================================================
# config
# =============================================================================


class TestConfigCommands:
    def test_show_without_config(self, runner, cli_root):
        result = runner.invoke(cli_root, ['config'])

        assert result.exit_code == 0
        assert '(not set)' in result.output
        assert LINEAR_API_URL in result.output

    def test_set_writes_config_file(self, runner, cli_root, isolated_config):
        result = runner.invoke(cli_root, ['config', 'set', 'team_key', 'ENG'])

        assert result.exit_code == 0
        assert json.loads(isolated_config.read_text()) == {'team_key': 'ENG'}
        assert get_config_value('team_key') == 'ENG'

    def test_api_key_is_masked(self, runner, cli_root):
        runner.invoke(cli_root, ['config', 'set', 'api_key', 'lin_api_secret_value'])

        result = runner.invoke(cli_root, ['config'])

        assert 'lin_api_secret_value' not in result.output
        assert '<masked:' in result.output

    def test_unknown_key_rejected(self, runner, cli_root):
        result = runner.invoke(cli_root, ['config', 'set', 'wallet', 'alice'])

        assert result.exit_code == 2

    def test_environment_overrides_file(self, runner, cli_root, monkeypatch):
        runner.invoke(cli_root, ['config', 'set', 'team_key', 'ENG'])
        monkeypatch.setenv('LINEAR_TEAM_KEY', 'OPS')

        assert get_config_value('team_key') == 'OPS'

    def test_clear_removes_file(self, runner, cli_root, isolated_config):
        runner.invoke(cli_root, ['config', 'set', 'team_key', 'ENG'])

        result = runner.invoke(cli_root, ['config', 'clear', '--force'])

        assert result.exit_code == 0
        assert not isolated_config.exists()


# =============================================================================
# issues
# =============================================================================


class TestIssuesCommand:
    def test_lists_issues(self, runner, cli_root, configured, sample_issues):
        data_source = _mock_data_source(issues=sample_issues)
        with patch('linear_tasks.cli.issue_commands.build_data_source', return_value=data_source):
            result = runner.invoke(cli_root, ['issues', '-q', 'crash', '--offset', '5', '--limit', '20'])

        assert result.exit_code == 0, result.output
        data_source.get_team_id_by_key.assert_awaited_once_with('ENG')
        data_source.get_issues.assert_called_once_with('team-eng', 'crash', 5, 20, False)
        assert 'ENG-1' in result.output
        assert 'ENG-2' in result.output

    def test_alias_and_team_option(self, runner, cli_root, configured, sample_issues):
        data_source = _mock_data_source(issues=sample_issues)
        with patch('linear_tasks.cli.issue_commands.build_data_source', return_value=data_source):
            result = runner.invoke(cli_root, ['i', '--team', 'DES', '--with-closed'])

        assert result.exit_code == 0, result.output
        data_source.get_team_id_by_key.assert_awaited_once_with('DES')
        data_source.get_issues.assert_called_once_with('team-eng', None, 0, 50, True)

    def test_empty_result(self, runner, cli_root, configured):
        with patch('linear_tasks.cli.issue_commands.build_data_source', return_value=_mock_data_source()):
            result = runner.invoke(cli_root, ['issues'])

        assert result.exit_code == 0
        assert 'No issues found' in result.output

    def test_negative_offset_rejected(self, runner, cli_root, configured):
        result = runner.invoke(cli_root, ['issues', '--offset', '-1'])

        assert result.exit_code == 2

    def test_unknown_team_fails(self, runner, cli_root, configured):
        data_source = _mock_data_source()
        data_source.get_team_id_by_key = AsyncMock(side_effect=ValueError("Team with key 'OPS' not found"))
        with patch('linear_tasks.cli.issue_commands.build_data_source', return_value=data_source):
            result = runner.invoke(cli_root, ['issues', '--team', 'OPS'])

        assert result.exit_code == 1
        assert "Team with key 'OPS' not found" in result.output
        data_source.get_issues.assert_not_called()

    def test_missing_api_key(self, runner, cli_root, monkeypatch):
        monkeypatch.setenv('LINEAR_TEAM_KEY', 'ENG')

        result = runner.invoke(cli_root, ['issues'])

        assert result.exit_code == 2
        assert 'No Linear API key configured' in result.output

    def test_missing_team_key(self, runner, cli_root, monkeypatch):
        monkeypatch.setenv('LINEAR_API_KEY', 'lin_api_test_key')

        result = runner.invoke(cli_root, ['issues'])

        assert result.exit_code == 2

    def test_against_paginated_backend(self, runner, cli_root, configured, backend_factory):
        backend = backend_factory(total=200)
        with patch('linear_tasks.cli.helpers.LinearGraphQLClient', return_value=backend):
            result = runner.invoke(cli_root, ['issues', '--offset', '60', '--limit', '10'])

        assert result.exit_code == 0, result.output
        assert [op.name for op in backend.operations] == ['GetTeamByKey', 'GetPageInfo', 'Issues']
        assert 'ENG-61' in result.output
        assert 'ENG-70' in result.output
        assert 'ENG-71' not in result.output


# =============================================================================
# states / set-state / test
# =============================================================================


class TestStateCommands:
    STATES = {TaskState('state-todo', 'Todo'), TaskState('state-done', 'Done')}

    def test_lists_states(self, runner, cli_root, configured):
        data_source = _mock_data_source(states=self.STATES)
        with patch('linear_tasks.cli.issue_commands.build_data_source', return_value=data_source):
            result = runner.invoke(cli_root, ['s', 'ENG-1'])

        assert result.exit_code == 0, result.output
        assert 'Todo' in result.output
        assert 'state-done' in result.output

    def test_set_state_by_name(self, runner, cli_root, configured):
        data_source = _mock_data_source(states=self.STATES)
        with patch('linear_tasks.cli.issue_commands.build_data_source', return_value=data_source):
            result = runner.invoke(cli_root, ['set-state', 'ENG-1', 'done'])

        assert result.exit_code == 0, result.output
        data_source.set_task_state.assert_awaited_once_with('ENG-1', TaskState('state-done', 'Done'))

    def test_set_state_by_id(self, runner, cli_root, configured):
        data_source = _mock_data_source(states=self.STATES)
        with patch('linear_tasks.cli.issue_commands.build_data_source', return_value=data_source):
            result = runner.invoke(cli_root, ['set-state', 'ENG-1', 'state-todo'])

        assert result.exit_code == 0, result.output
        data_source.set_task_state.assert_awaited_once_with('ENG-1', TaskState('state-todo', 'Todo'))

    def test_unknown_state(self, runner, cli_root, configured):
        data_source = _mock_data_source(states=self.STATES)
        with patch('linear_tasks.cli.issue_commands.build_data_source', return_value=data_source):
            result = runner.invoke(cli_root, ['set-state', 'ENG-1', 'Blocked'])

        assert result.exit_code == 1
        assert 'Unknown state' in result.output
        data_source.set_task_state.assert_not_awaited()

    def test_failed_update_is_reported(self, runner, cli_root, configured):
        data_source = _mock_data_source(states=self.STATES)
        data_source.set_task_state = AsyncMock(
            side_effect=RuntimeError('State could not be updated for Task ENG-1 to Done')
        )
        with patch('linear_tasks.cli.issue_commands.build_data_source', return_value=data_source):
            result = runner.invoke(cli_root, ['set-state', 'ENG-1', 'Done'])

        assert result.exit_code == 1
        assert 'State could not be updated' in result.output

    @pytest.mark.parametrize('failure, expected_code', [(None, 0), (ValueError('No teams found'), 1)])
    def test_connection_check(self, runner, cli_root, configured, failure, expected_code):
        data_source = _mock_data_source()
        if failure is not None:
            data_source.test_connection = AsyncMock(side_effect=failure)
        with patch('linear_tasks.cli.issue_commands.build_data_source', return_value=data_source):
            result = runner.invoke(cli_root, ['test'])

        assert result.exit_code == expected_code
        data_source.test_connection.assert_awaited_once_with('ENG')


class TestRootGroup:
    def test_help_lists_aliases(self, runner, cli_root):
        result = runner.invoke(cli_root, ['--help'])

        assert result.exit_code == 0
        assert 'issues, i' in result.output
        assert 'states, s' in result.output

    def test_debug_flag_enables_debug_logging(self, runner, cli_root):
        with patch('linear_tasks.cli.main.bt.logging') as mock_logging:
            runner.invoke(cli_root, ['--debug', 'config'])

        mock_logging.set_debug.assert_called_once_with(True)
