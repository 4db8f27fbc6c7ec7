"""
PORTS - Interfaces that infrastructure implements

A "port" is an abstract interface that defines WHAT the domain needs,
without specifying HOW it's done.

Subfolders:
- repositories/  → Message and user persistence interfaces
- (root files)   → Live connection handle pushed to by the realtime core
"""
