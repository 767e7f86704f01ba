"""
Application layer package.

Contains use cases that orchestrate domain logic.
Each entity gets one use-case class built on the generic CRUD
skeleton; bespoke rules live in the domain layer.
This layer depends on domain ports, never on infrastructure.
"""
