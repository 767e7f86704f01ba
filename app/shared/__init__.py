"""
Cross-cutting concerns shared by every router and use case.

- errors: domain error to HTTP response mapping
- security: response headers and request rate limits
- cache: read-through cache for list endpoints
- logging: process-wide logging setup
"""
