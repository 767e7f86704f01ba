"""
HTTP interface for the marketplace bounded context.

Routers, request/response schemas, entity-to-view presenters and the
dependency wiring that builds use cases per request.
"""
