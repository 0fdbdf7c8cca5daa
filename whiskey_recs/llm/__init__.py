"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Offer an optional LLM-backed reader for free-text whiskey requests.
- Graceful fallback to the regex interpreter when the LLM is unavailable
  or returns invalid output.
"""
