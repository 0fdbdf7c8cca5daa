"""
Catalog layer.

Responsibilities:
- Define the whiskey, user, preference, history and tasting-note records.
- Load the seed catalog (CSV via pandas) and demo users.
- Hold everything in an explicitly constructed, lock-guarded store.
- Map between numeric prices and the legacy low/mid/high tiers.
"""
