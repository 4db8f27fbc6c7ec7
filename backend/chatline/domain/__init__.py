"""
DOMAIN LAYER - The Heart of Your Application

This layer contains:
- Entities: Business objects with identity (User, Message)
- Value Objects: Immutable types (UserId, MessageId, MediaPayload)
- Ports: Interfaces that infrastructure implements (repositories, connections)
- Exceptions: Domain-specific errors

RULES:
1. NO framework imports (no FastAPI, Prisma, Pydantic, etc.)
2. NO I/O operations (no database, no HTTP, no sockets)
3. Only depends on Python stdlib
4. This is where business rules live
"""
