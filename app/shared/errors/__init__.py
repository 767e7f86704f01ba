"""
Error handling shared by all marketplace routes.

Domain errors raised by use cases become JSON error envelopes here,
so routers never build error responses themselves.
"""
