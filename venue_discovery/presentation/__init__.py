"""
Presentation boundary for the discovery screen.

Responsibilities:
- Turn filtered venues into list rows and map markers.
- Issue focus commands (center/zoom on one venue).
- Keep the rendered output in sync with venues, criteria and location.
"""
