"""
Geographic helpers.

Responsibilities:
- Great-circle (haversine) distance between two coordinates.
- Vectorised distances from one origin to a whole catalog snapshot.
"""
