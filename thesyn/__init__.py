"""
Thesyn - AI research assistant backend.

Turns a research paper (PDF, pasted text or URL) into a structured analysis,
a context-seeded chat, grounded web search and spoken summaries, all backed
by Gemini.
"""

__version__ = "1.0.0"
