"""Domain layer - rate limiting vocabulary.

Structure:
- value_objects/: RatelimitResponse, Transaction (immutable)
- protocols/: Ports the rate limiter consumes (store, logger)
- enums/: AlgorithmKind
- errors/: Domain errors and the invariant-violation exception

The domain layer has NO dependencies on Redis, structlog, or pydantic.
"""
