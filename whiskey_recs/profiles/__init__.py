"""
User profiles.

Responsibilities:
- Store taste preferences and interaction history (views, likes,
  dislikes, searches).
- Accept, list and delete validated tasting notes.
"""
