"""
Portfolio chat assistant.

Retrieval-augmented question answering over a portfolio site's content.
"""

__version__ = "0.1.0"
