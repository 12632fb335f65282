"""Read-only dashboard rollups and the tutor roster."""
