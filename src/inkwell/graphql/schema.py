import strawberry
import structlog
from strawberry.extensions import SchemaExtension
from strawberry.fastapi import GraphQLRouter

from inkwell.graphql.context import get_context
from inkwell.graphql.mutations import Mutation
from inkwell.graphql.queries import Query
from inkwell.graphql.types import (
    Collection,
    Comment,
    Notification,
    Publication,
    PublicationInvitation,
    Story,
    Tag,
    User,
)

logger = structlog.get_logger(__name__)


class ErrorLoggingExtension(SchemaExtension):
    """Logs every failed operation with the codes of its errors."""

    def on_operation(self):
        yield
        result = self.execution_context.result
        if result is None or not result.errors:
            return

        codes = [(error.extensions or {}).get("code", "INTERNAL_ERROR") for error in result.errors]
        log = logger.error if "INTERNAL_ERROR" in codes else logger.info
        log(
            "graphql_errors",
            operation=self.execution_context.operation_name,
            codes=codes,
        )


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    types=[User, Story, Comment, Tag, Publication, PublicationInvitation, Collection, Notification],
    extensions=[ErrorLoggingExtension],
)

graphql_router = GraphQLRouter(
    schema,
    context_getter=get_context,
)
