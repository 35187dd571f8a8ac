"""
The Daily Stallman (TDS) - News Digest Generator

Collects the articles linked from the stallman.org political news feed,
extracts their readable content and renders everything into a single,
self-contained HTML page.
"""

__version__ = "0.1.0"
