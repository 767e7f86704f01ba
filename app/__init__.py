"""
Super Farmer: agricultural commodity marketplace API.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters) with domain-driven design.

Bounded contexts:
    - marketplace: Regions, commodities, land allocation, harvests,
      sales, and price/demand/supply tracking with history.

Layers:
    - domain: Pure business logic, entities, ports (ABCs), errors.
    - application: Use cases, commands, orchestration.
    - infrastructure: SQLAlchemy adapters implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging, cache).
"""
