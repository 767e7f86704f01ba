"""
Domain layer package.

Entities, the capacity and history rules, ports and errors.
Nothing here imports a framework or touches storage.
"""
