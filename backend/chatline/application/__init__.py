"""
APPLICATION LAYER - Use Cases & Orchestration

This layer contains:
- commands/  → Write operations (CQRS): sending a message
- queries/   → Read operations (CQRS): pair history, roster
- realtime/  → Connection registry, presence broadcaster, message router
- dto/       → Data Transfer Objects (wire shapes)
- common/    → Shared interfaces (Command, Query base classes)

Rules:
- Depends on Domain layer only
- No HTTP/framework code here
- Coordinates entities, repositories and live connections
"""
