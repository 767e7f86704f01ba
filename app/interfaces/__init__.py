"""
Interfaces layer package.

HTTP entry points: the health probe and the marketplace routers.
Routers translate requests into commands, call a use case, and wrap
the result in a {"data": ...} envelope.
"""
