# The MIT License (MIT)
# Copyright © 2025 Entrius

import asyncio
import traceback
from typing import List, Optional, Set

import bittensor as bt

from linear_tasks.classes import GraphQLResponse, PositionState, ShortIssue, TaskState, Team
from linear_tasks.pagination import fetch_issues, resolve_page_info, select_queries
from linear_tasks.queries import (
    GraphQLOperation,
    connection_check_query,
    issue_states_query,
    team_by_key_query,
    update_issue_state_mutation,
)
from linear_tasks.utils.graphql_client import LinearGraphQLClient


def _raise_first_error(response: GraphQLResponse) -> None:
    error = response.first_error
    if error is not None:
        raise ValueError(error.message)


def _teams(response: GraphQLResponse) -> List[Team]:
    nodes = ((response.data or {}).get('teams') or {}).get('nodes') or []
    return [Team(id=node['id'], key=node['key'], name=node.get('name')) for node in nodes]


class LinearRemoteDataSource:
    """Issue, team and workflow state access for one Linear workspace.

    Async methods run each blocking request on a worker thread, one request at a time. The
    object holds no per-call state, so independent callers may use it concurrently.
    """

    def __init__(self, client: LinearGraphQLClient):
        self.client = client

    async def _execute(self, operation: GraphQLOperation) -> GraphQLResponse:
        return await asyncio.to_thread(self.client.execute, operation)

    async def get_team_id_by_key(self, team_key: str) -> str:
        """
        Resolve a team key (for example "ENG") to the team id.

        Raises:
            ValueError: if the server reports an error or no team has that key
        """
        response = await self._execute(team_by_key_query())
        _raise_first_error(response)

        team = next((team for team in _teams(response) if team.key == team_key), None)
        if team is None:
            raise ValueError(f"Team with key '{team_key}' not found")
        return team.id

    def get_issues(
        self,
        team_id: str,
        query: Optional[str],
        offset: int,
        limit: int,
        with_closed: bool,
    ) -> List[ShortIssue]:
        """
        Blocking entry point for hosts without an event loop.

        Never raises: any failure, including cancellation of the wait, is logged and turned into
        an empty list.

        Args:
            team_id (str): Linear team id
            query (Optional[str]): Free text filter, None or blank to list everything
            offset (int): Number of issues to skip
            limit (int): Maximum number of issues to return
            with_closed (bool): Accepted for the host contract, closed issues are not filtered yet

        Returns:
            List[ShortIssue]: Up to ``limit`` issues in backend order
        """
        # TODO: honor with_closed once Linear's IssueFilter state type is wired into both issue queries
        bt.logging.info(
            f"getIssues called with teamId: {team_id}, query: {query}, "
            f"offset: {offset}, limit: {limit}, withClosed: {with_closed}"
        )
        try:
            result = asyncio.run(self.get_issues_async(team_id, query, offset, limit))
            bt.logging.info(f"getIssues returned {len(result)} issues")
            return result
        except (asyncio.CancelledError, KeyboardInterrupt) as e:
            bt.logging.error(f"getIssues was interrupted: {e!r}")
            return []
        except Exception as e:
            bt.logging.error(f"{type(e).__name__} in getIssues: {e}")
            bt.logging.error(f"Stack trace: {traceback.format_exc()}")
            return []

    async def get_issues_async(
        self,
        team_id: str,
        query: Optional[str],
        offset: int,
        limit: int,
    ) -> List[ShortIssue]:
        """Skip ``offset`` issues, then fetch up to ``limit`` issues.

        Raises:
            ValueError: if offset or limit is negative
        """
        if offset < 0:
            raise ValueError(f"offset must be non-negative, got {offset}")
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        if limit == 0:
            return []

        queries = select_queries(team_id, query)
        bt.logging.debug(f"Using {queries.strategy.value} issue queries")

        position = await resolve_page_info(offset, queries.page_info_query, self._execute)
        if position.state is PositionState.NOT_RESOLVED:
            bt.logging.warning(f"Could not resolve offset {offset}, fetching from the start of the list")

        return await fetch_issues(limit, position.starting_page_info(), queries.issues_query, self._execute)

    async def test_connection(self, team_key: str) -> None:
        """
        Check that the API key works and can see the team.

        Raises:
            ValueError: on a server error, an empty team list, or a missing team
        """
        response = await self._execute(connection_check_query())
        _raise_first_error(response)

        teams = _teams(response)
        if not teams:
            raise ValueError("No teams found")
        if not any(team.key == team_key for team in teams):
            raise ValueError(f"Team with key '{team_key}' not found")

    async def get_available_task_states(self, issue_id: str) -> Set[TaskState]:
        """Workflow states of the issue's team, empty when the issue or its team is not visible.

        Raises:
            ValueError: if the server reports an error
        """
        response = await self._execute(issue_states_query(issue_id))
        _raise_first_error(response)

        issue = (response.data or {}).get('issue') or {}
        nodes = ((issue.get('team') or {}).get('states') or {}).get('nodes') or []
        return {TaskState(id=node['id'], name=node['name']) for node in nodes}

    async def set_task_state(self, issue_id: str, state: TaskState) -> None:
        """
        Move an issue to another workflow state.

        Raises:
            ValueError: if the server reports an error
            RuntimeError: if the update did not succeed
        """
        response = await self._execute(update_issue_state_mutation(issue_id, state.id))
        _raise_first_error(response)

        issue_update = (response.data or {}).get('issueUpdate') or {}
        if issue_update.get('success') is not True:
            raise RuntimeError(f"State could not be updated for Task {issue_id} to {state.name}")
        bt.logging.info(f"Task {issue_id} moved to {state}")
