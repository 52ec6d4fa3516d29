"""
YouTube Interpreter - chapter-by-chapter video interpretation with LLMs.

A small pipeline for:
- Validating YouTube URLs and fetching best-effort metadata
- Detecting chapters with a web-search grounded model request
- Interpreting each chapter in a chosen style and knowledge level
- Keeping a local history of interpreted videos
- Exporting interpretations as markdown
"""

__version__ = "0.1.0"
