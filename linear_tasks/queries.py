# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
GraphQL documents used against the Linear API and builders for the operations that carry them.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

# =============================================================================
# Fragments
# =============================================================================
PAGE_INFO_ISSUE_CONNECTION = """
    fragment PageInfoIssueConnection on IssueConnection {
      pageInfo {
        hasNextPage
        endCursor
      }
    }
    """

SHORT_ISSUE_CONNECTION = """
    fragment ShortIssueConnection on IssueConnection {
      nodes {
        id
        identifier
        title
        description
        url
        createdAt
        updatedAt
        state {
          name
          type
        }
      }
      ...PageInfoIssueConnection
    }
    """

# =============================================================================
# Issue queries
# =============================================================================
ISSUES_QUERY = """
    query Issues($teamId: String!, $first: Int!, $after: String) {
      team(id: $teamId) {
        issues(first: $first, after: $after, orderBy: updatedAt) {
          ...ShortIssueConnection
        }
      }
    }
    """ + SHORT_ISSUE_CONNECTION + PAGE_INFO_ISSUE_CONNECTION

SEARCH_ISSUES_QUERY = """
    query SearchIssues($filter: IssueFilter!, $teamId: String!, $first: Int!, $after: String) {
      team(id: $teamId) {
        issues(first: $first, after: $after, orderBy: updatedAt, filter: $filter) {
          ...ShortIssueConnection
        }
      }
    }
    """ + SHORT_ISSUE_CONNECTION + PAGE_INFO_ISSUE_CONNECTION

GET_PAGE_INFO_QUERY = """
    query GetPageInfo($teamId: String!, $first: Int!, $after: String) {
      team(id: $teamId) {
        issues(first: $first, after: $after, orderBy: updatedAt) {
          ...PageInfoIssueConnection
        }
      }
    }
    """ + PAGE_INFO_ISSUE_CONNECTION

GET_SEARCH_ISSUES_PAGE_INFO_QUERY = """
    query GetSearchIssuesPageInfo($filter: IssueFilter!, $teamId: String!, $first: Int!, $after: String) {
      team(id: $teamId) {
        issues(first: $first, after: $after, orderBy: updatedAt, filter: $filter) {
          ...PageInfoIssueConnection
        }
      }
    }
    """ + PAGE_INFO_ISSUE_CONNECTION

# =============================================================================
# Teams, states and mutations
# =============================================================================
GET_TEAM_BY_KEY_QUERY = """
    query GetTeamByKey {
      teams {
        nodes {
          id
          key
        }
      }
    }
    """

TEST_CONNECTION_QUERY = """
    query TestConnection {
      teams {
        nodes {
          id
          key
          name
        }
      }
    }
    """

GET_ISSUE_STATES_QUERY = """
    query GetIssueStates($id: String!) {
      issue(id: $id) {
        team {
          states {
            nodes {
              id
              name
            }
          }
        }
      }
    }
    """

UPDATE_ISSUE_STATE_MUTATION = """
    mutation UpdateIssueState($id: String!, $stateId: String!) {
      issueUpdate(id: $id, input: { stateId: $stateId }) {
        success
      }
    }
    """


@dataclass(frozen=True)
class GraphQLOperation:
    """A named GraphQL document bound to its variables"""

    name: str
    document: str
    variables: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return {"operationName": self.name, "query": self.document, "variables": self.variables}


# "ENG-1673" or "1673"
ISSUE_REFERENCE_PATTERN = re.compile(r'^\s*(?:[A-Za-z][A-Za-z0-9]*-)?(\d+)\s*$')


def parse_issue_number(query: str) -> Optional[int]:
    """Return the issue number when the query is an issue identifier or a bare number."""
    match = ISSUE_REFERENCE_PATTERN.match(query)
    return int(match.group(1)) if match else None


def search_filter(query: str) -> Dict[str, Any]:
    """
    Build the IssueFilter for a free text search.

    Text is matched against the searchable content of the issue. A query that looks like an
    issue reference also matches the issue with that number.
    """
    text_filter = {"searchableContent": {"contains": query}}
    number = parse_issue_number(query)
    if number is None:
        return text_filter
    return {"or": [text_filter, {"number": {"eq": number}}]}


def issues_query(team_id: str, first: int, after: Optional[str]) -> GraphQLOperation:
    return GraphQLOperation("Issues", ISSUES_QUERY, {"teamId": team_id, "first": first, "after": after})


def search_issues_query(query: str, team_id: str, first: int, after: Optional[str]) -> GraphQLOperation:
    return GraphQLOperation(
        "SearchIssues",
        SEARCH_ISSUES_QUERY,
        {"filter": search_filter(query), "teamId": team_id, "first": first, "after": after},
    )


def page_info_query(team_id: str, first: int, after: Optional[str]) -> GraphQLOperation:
    return GraphQLOperation("GetPageInfo", GET_PAGE_INFO_QUERY, {"teamId": team_id, "first": first, "after": after})


def search_issues_page_info_query(query: str, team_id: str, first: int, after: Optional[str]) -> GraphQLOperation:
    return GraphQLOperation(
        "GetSearchIssuesPageInfo",
        GET_SEARCH_ISSUES_PAGE_INFO_QUERY,
        {"filter": search_filter(query), "teamId": team_id, "first": first, "after": after},
    )


def team_by_key_query() -> GraphQLOperation:
    return GraphQLOperation("GetTeamByKey", GET_TEAM_BY_KEY_QUERY)


def connection_check_query() -> GraphQLOperation:
    return GraphQLOperation("TestConnection", TEST_CONNECTION_QUERY)


def issue_states_query(issue_id: str) -> GraphQLOperation:
    return GraphQLOperation("GetIssueStates", GET_ISSUE_STATES_QUERY, {"id": issue_id})


def update_issue_state_mutation(issue_id: str, state_id: str) -> GraphQLOperation:
    return GraphQLOperation(
        "UpdateIssueState",
        UPDATE_ISSUE_STATE_MUTATION,
        {"id": issue_id, "stateId": state_id},
    )


def extract_issue_connection(data: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Return the ``team.issues`` connection shared by every issue query, or None when absent."""
    if not data:
        return None
    team = data.get('team')
    if not team:
        return None
    return team.get('issues')
