"""
QUERIES - Read operations (CQRS)

- messages/ → GetMessageHistory (pair history for the conversation view)
- users/    → ListRoster (sidebar users with online flag)
"""
