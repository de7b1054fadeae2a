"""
Venue filtering core.

Responsibilities:
- Normalize the loosely-typed venue feed into the canonical Venue schema.
- Load the venue collection once from Supabase or a CSV export.
- Compute haversine distances between coordinates.
- Filter the collection against the user's current criteria.
"""
