"""
Free-text query layer.

Responsibilities:
- Pull price, flavor, category and qualitative hints out of a request
  with a fixed set of patterns.
- Translate hints into catalog filters.
- Optionally ask an LLM for the same hints, behind one small function.
"""
