from bff.gql.schema import get_context, schema

__all__ = ["get_context", "schema"]
