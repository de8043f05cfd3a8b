# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Shared fixtures: an in-memory Linear backend that paginates like the real API.
"""

from typing import Dict, Iterable, List, Optional

import pytest

from linear_tasks.classes import GraphQLError, GraphQLResponse
from linear_tasks.queries import GraphQLOperation

ISSUE_OPERATIONS = ('Issues', 'SearchIssues')
PAGE_INFO_OPERATIONS = ('GetPageInfo', 'GetSearchIssuesPageInfo')


def make_issue_node(number: int, title: Optional[str] = None, state_type: str = 'unstarted') -> Dict:
    return {
        'id': f'issue-{number}',
        'identifier': f'ENG-{number}',
        'title': title or f'Issue {number}',
        'description': None,
        'url': f'https://linear.app/acme/issue/ENG-{number}',
        'createdAt': '2026-01-01T10:00:00.000Z',
        'updatedAt': '2026-02-01T10:00:00.000Z',
        'state': {'name': 'Todo', 'type': state_type},
    }


def _matches(node: Dict, issue_filter: Dict) -> bool:
    """Evaluate the subset of Linear's IssueFilter used by the search queries."""
    if 'or' in issue_filter:
        return any(_matches(node, branch) for branch in issue_filter['or'])
    if 'number' in issue_filter:
        return int(node['identifier'].rsplit('-', 1)[1]) == issue_filter['number']['eq']
    needle = issue_filter['searchableContent']['contains'].lower()
    return needle in node['title'].lower()


class FakeLinearBackend:
    """Answers issue and team queries from a fixed list of issue nodes.

    Cursors are the index after the last returned node. ``max_page_size`` caps how many nodes a
    page holds regardless of ``first``. Calls listed in ``fail_calls`` (1-based) come back with
    no data, calls in ``error_calls`` carry an error next to their data.
    """

    def __init__(
        self,
        total: int = 0,
        nodes: Optional[List[Dict]] = None,
        max_page_size: Optional[int] = None,
        fail_calls: Iterable[int] = (),
        error_calls: Iterable[int] = (),
        teams: Optional[List[Dict]] = None,
    ):
        self.nodes = nodes if nodes is not None else [make_issue_node(i) for i in range(1, total + 1)]
        self.max_page_size = max_page_size
        self.fail_calls = set(fail_calls)
        self.error_calls = set(error_calls)
        self.teams = teams if teams is not None else [{'id': 'team-eng', 'key': 'ENG', 'name': 'Engineering'}]
        self.operations: List[GraphQLOperation] = []

    def execute(self, operation: GraphQLOperation) -> GraphQLResponse:
        self.operations.append(operation)
        call_number = len(self.operations)

        if call_number in self.fail_calls:
            return GraphQLResponse(data=None, errors=[GraphQLError('Internal server error')])

        if operation.name in ('GetTeamByKey', 'TestConnection'):
            return GraphQLResponse(data={'teams': {'nodes': self.teams}})

        variables = operation.variables
        nodes = self.nodes
        if variables.get('filter'):
            nodes = [node for node in nodes if _matches(node, variables['filter'])]

        start = int(variables['after']) if variables.get('after') else 0
        size = variables['first'] if self.max_page_size is None else min(variables['first'], self.max_page_size)
        page = nodes[start:start + size]
        end = start + len(page)

        connection = {'pageInfo': {'hasNextPage': end < len(nodes), 'endCursor': str(end) if page else None}}
        if operation.name in ISSUE_OPERATIONS:
            connection['nodes'] = page

        errors = [GraphQLError('Partial failure')] if call_number in self.error_calls else []
        return GraphQLResponse(data={'team': {'issues': connection}}, errors=errors)

    async def execute_async(self, operation: GraphQLOperation) -> GraphQLResponse:
        return self.execute(operation)

    def calls(self, *names: str) -> List[GraphQLOperation]:
        return [operation for operation in self.operations if operation.name in names]

    def page_sizes(self, *names: str) -> List[int]:
        return [operation.variables['first'] for operation in self.calls(*names)]


@pytest.fixture
def backend_factory():
    """Build a FakeLinearBackend with the given options."""
    return FakeLinearBackend


@pytest.fixture
def issue_node():
    """Build a raw issue node as returned by the ShortIssueConnection fragment."""
    return make_issue_node
