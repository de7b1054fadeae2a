"""
Location tracking.

Responsibilities:
- Acquire the user's coordinate from a best-effort position source.
- Expose the pending / resolved / unavailable state explicitly.
- Notify subscribers whenever a new coordinate arrives.
"""
