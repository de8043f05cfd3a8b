# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Offset/limit access on top of Linear's forward-only cursor pagination.

Linear only hands out ``first``/``after`` pages, so reaching an offset means walking page info
from the start of the connection, then fetching issues in batches from that cursor on.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, List, Optional

import bittensor as bt

from linear_tasks.classes import GraphQLResponse, IssuePage, PageInfo, ResolvedPosition, ShortIssue
from linear_tasks.constants import ISSUES_BATCH_SIZE, PAGE_INFO_MAX_COUNT
from linear_tasks.queries import (
    GraphQLOperation,
    extract_issue_connection,
    issues_query,
    page_info_query,
    search_issues_page_info_query,
    search_issues_query,
)
from linear_tasks.utils.utils import is_blank

QueryFactory = Callable[[int, Optional[str]], GraphQLOperation]
Executor = Callable[[GraphQLOperation], Awaitable[GraphQLResponse]]


class QueryStrategy(Enum):
    """Which issue connection a request reads from"""

    LIST = "LIST"  # all team issues, by update time
    SEARCH = "SEARCH"  # team issues whose content matches a text filter


@dataclass(frozen=True)
class IssueQueries:
    strategy: QueryStrategy
    page_info_query: QueryFactory
    issues_query: QueryFactory


def select_strategy(query: Optional[str]) -> QueryStrategy:
    return QueryStrategy.LIST if is_blank(query) else QueryStrategy.SEARCH


def select_queries(team_id: str, query: Optional[str]) -> IssueQueries:
    """Bind the page info and issue query factories for a team and optional text filter.

    Args:
        team_id (str): Linear team id
        query (Optional[str]): Free text filter; None or blank lists every issue

    Returns:
        IssueQueries: factories taking ``(first, after)``
    """
    strategy = select_strategy(query)
    if strategy is QueryStrategy.LIST:
        return IssueQueries(
            strategy=strategy,
            page_info_query=lambda first, after: page_info_query(team_id, first, after),
            issues_query=lambda first, after: issues_query(team_id, first, after),
        )
    return IssueQueries(
        strategy=strategy,
        page_info_query=lambda first, after: search_issues_page_info_query(query, team_id, first, after),
        issues_query=lambda first, after: search_issues_query(query, team_id, first, after),
    )


async def resolve_page_info(offset: int, create_query: QueryFactory, execute: Executor) -> ResolvedPosition:
    """
    Walk page info forward until ``offset`` issues have been skipped.

    Only page info is requested, at most PAGE_INFO_MAX_COUNT issues per step. A response without
    data ends the walk at the last position reached; running out of pages is a normal end too.

    Args:
        offset (int): Number of issues to skip
        create_query (QueryFactory): Builds the page info query for ``(first, after)``
        execute (Executor): Sends one operation

    Returns:
        ResolvedPosition: AT_START for offset 0, AT the last page reached, or NOT_RESOLVED when
        not a single page could be read
    """
    if offset <= 0:
        return ResolvedPosition.at_start()

    pending_offset = offset
    page_info = PageInfo.start()
    pages_walked = 0

    while pending_offset > 0 and page_info.has_next_page:
        page_size = min(pending_offset, PAGE_INFO_MAX_COUNT)
        operation = create_query(page_size, page_info.end_cursor)
        response = await execute(operation)

        if response.has_errors:
            bt.logging.warning(f"GraphQL errors while walking page info: {response.error_messages()}")

        connection = extract_issue_connection(response.data)
        if connection is None or connection.get('pageInfo') is None:
            bt.logging.warning(f"{operation.name} returned no page info, stopping walk with {pending_offset} left")
            break

        page_info = PageInfo.from_graphql(connection['pageInfo'])
        pending_offset -= page_size
        pages_walked += 1

    if pages_walked == 0:
        return ResolvedPosition.not_resolved()

    bt.logging.debug(f"Walked {pages_walked} pages for offset {offset}: {page_info}")
    return ResolvedPosition.at(page_info)


async def fetch_issues(
    limit: int,
    initial_page_info: Optional[PageInfo],
    create_query: QueryFactory,
    execute: Executor,
) -> List[ShortIssue]:
    """
    Fetch up to ``limit`` issues in batches of at most ISSUES_BATCH_SIZE.

    Args:
        limit (int): Maximum number of issues to return
        initial_page_info (Optional[PageInfo]): Position to continue from, None for the start of the list
        create_query (QueryFactory): Builds the issue query for ``(first, after)``
        execute (Executor): Sends one operation

    Returns:
        List[ShortIssue]: Issues in backend order. Shorter than ``limit`` when the list ends or a
        response comes back without data.
    """
    page_info = initial_page_info or PageInfo.start()
    bt.logging.debug(f"pageInfo: {page_info}")

    remaining_issues = limit
    issues: List[ShortIssue] = []

    while remaining_issues > 0 and page_info.has_next_page:
        bt.logging.debug(f"remainingIssues: {remaining_issues}")
        number_of_items = min(remaining_issues, ISSUES_BATCH_SIZE)
        operation = create_query(number_of_items, page_info.end_cursor)
        bt.logging.debug(f"Executing query: {operation.name}")
        response = await execute(operation)

        if response.has_errors:
            bt.logging.error(f"GraphQL errors: {response.error_messages()}")

        connection = extract_issue_connection(response.data)
        if connection is None:
            bt.logging.warning("Response data or issue connection is missing, stopping")
            break

        page = IssuePage.from_connection(connection)
        bt.logging.debug(f"Fetched {len(page.nodes)} nodes")

        issues.extend(page.nodes)
        page_info = page.page_info
        remaining_issues -= len(page.nodes)
        bt.logging.debug(f"pageInfo: {page_info}")

        # an empty page cannot advance the cursor
        if not page.nodes:
            break

    bt.logging.debug(f"issues: {', '.join(issue.identifier for issue in issues)}")
    return issues
