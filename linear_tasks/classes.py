# The MIT License (MIT)
# Copyright © 2025 Entrius

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from linear_tasks.constants import CLOSED_STATE_TYPES


@dataclass(frozen=True)
class PageInfo:
    """Cursor position of a page in an issue connection"""

    has_next_page: bool
    end_cursor: Optional[str] = None

    @classmethod
    def start(cls) -> 'PageInfo':
        """Position before the first page of a connection."""
        return cls(has_next_page=True, end_cursor=None)

    @classmethod
    def from_graphql(cls, page_info: Dict[str, Any]) -> 'PageInfo':
        return cls(
            has_next_page=bool(page_info.get('hasNextPage')),
            end_cursor=page_info.get('endCursor'),
        )

    def __str__(self) -> str:
        return f"PageInfo(hasNextPage={self.has_next_page}, endCursor={self.end_cursor})"


@dataclass(frozen=True)
class ShortIssue:
    """Read-only summary of a Linear issue as shown in task lists"""

    id: str
    identifier: str
    title: str
    description: Optional[str] = None
    url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    state_name: Optional[str] = None
    state_type: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        return self.state_type in CLOSED_STATE_TYPES

    @classmethod
    def from_node(cls, node: Dict[str, Any]) -> 'ShortIssue':
        """Create ShortIssue from a node of the ShortIssueConnection fragment"""
        state = node.get('state') or {}
        return cls(
            id=node['id'],
            identifier=node['identifier'],
            title=node.get('title') or '',
            description=node.get('description'),
            url=node.get('url'),
            created_at=node.get('createdAt'),
            updated_at=node.get('updatedAt'),
            state_name=state.get('name'),
            state_type=state.get('type'),
        )


@dataclass(frozen=True)
class IssuePage:
    """One page of issues together with the page info that follows it.

    Both the plain listing and the text search queries resolve to this shape.
    """

    nodes: List[ShortIssue]
    page_info: PageInfo

    @classmethod
    def from_connection(cls, connection: Dict[str, Any]) -> 'IssuePage':
        return cls(
            nodes=[ShortIssue.from_node(node) for node in connection.get('nodes') or []],
            page_info=PageInfo.from_graphql(connection.get('pageInfo') or {}),
        )


@dataclass(frozen=True)
class TaskState:
    """Workflow state an issue can be moved to"""

    id: str
    name: str

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


@dataclass(frozen=True)
class Team:
    id: str
    key: str
    name: Optional[str] = None


@dataclass(frozen=True)
class GraphQLError:
    message: str


@dataclass
class GraphQLResponse:
    """Result of a single GraphQL round trip.

    Either field may be populated; a response can carry usable data and errors at the same time.
    """

    data: Optional[Dict[str, Any]] = None
    errors: List[GraphQLError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def first_error(self) -> Optional[GraphQLError]:
        return self.errors[0] if self.errors else None

    def error_messages(self) -> str:
        return ', '.join(error.message for error in self.errors)

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> 'GraphQLResponse':
        errors = []
        for error in payload.get('errors') or []:
            message = error.get('message') if isinstance(error, dict) else None
            errors.append(GraphQLError(message=message or str(error)))
        return cls(data=payload.get('data'), errors=errors)


class PositionState(Enum):
    """Outcome of walking page info up to an offset"""

    NOT_RESOLVED = "NOT_RESOLVED"  # a walk was needed but no page could be read
    AT_START = "AT_START"  # offset was zero, no walk needed
    AT = "AT"  # walked to a page boundary


@dataclass(frozen=True)
class ResolvedPosition:
    state: PositionState
    page_info: Optional[PageInfo] = None

    @classmethod
    def not_resolved(cls) -> 'ResolvedPosition':
        return cls(PositionState.NOT_RESOLVED)

    @classmethod
    def at_start(cls) -> 'ResolvedPosition':
        return cls(PositionState.AT_START)

    @classmethod
    def at(cls, page_info: PageInfo) -> 'ResolvedPosition':
        return cls(PositionState.AT, page_info)

    def starting_page_info(self) -> Optional[PageInfo]:
        """Page info the issue fetch should continue from, None meaning the start of the list."""
        if self.state is PositionState.AT:
            return self.page_info
        return None

    def __str__(self) -> str:
        if self.state is PositionState.AT:
            return f"ResolvedPosition(AT, {self.page_info})"
        return f"ResolvedPosition({self.state.value})"
