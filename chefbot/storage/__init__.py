"""
Storage adapter.

Responsibilities:
- Decide once, on connect, between the SQL database and the in-memory demo store.
- Expose one generic repository per entity (create / read / update / delete).
- Seed the deterministic demo catalogue into an empty store.
"""
