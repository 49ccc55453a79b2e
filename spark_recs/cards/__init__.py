"""
Card understanding layer.

Responsibilities:
- Hold the curated question/mission taxonomy and its pairing metadata.
- Classify a card as at_home / outbound / hybrid (the recommendation gate).
- Derive a heuristic tag/keyword/intensity profile from free text.
"""
