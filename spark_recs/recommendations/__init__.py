"""
Nearby business recommendation engine.

Responsibilities:
- Gate out cards that don't require leaving the house.
- Filter the business catalog to places near the user.
- Score and rank candidates using deterministic heuristics.
- Return at most three businesses ready for API serialisation.
"""
