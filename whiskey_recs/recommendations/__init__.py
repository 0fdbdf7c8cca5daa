"""
Recommendation engine.

Responsibilities:
- Filter and sort the whiskey catalog on structured criteria.
- Combine free-text hints, explicit filters and a user's taste history
  into a short ranked list of picks.
- Explain each pick in plain language.
- Score catalog entries by similarity to a reference whiskey.
"""
