"""
Affiliate program layer.

Responsibilities:
- Describe the affiliate programs listings can come from.
- Add tracking parameters to outgoing listing URLs.
- Record affiliate clicks for analytics.
"""
