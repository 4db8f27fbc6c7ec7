"""
INFRASTRUCTURE LAYER - Adapters for the domain ports

- persistence/ → in-memory and Prisma (PostgreSQL) repositories
- cache/       → Redis read-through cache for pair history
- realtime/    → queued WebSocket connection handle
"""
