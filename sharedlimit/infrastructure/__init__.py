"""Infrastructure layer - adapters for domain ports.

Structure:
- store/: Redis implementation of StoreProtocol
- logging/: structlog implementation of LoggerProtocol

The infrastructure layer depends on the domain layer (implements protocols).
"""
