"""
GoodNews Digest.

Curates positive news per interest and emails each subscriber a digest
at 7:30 AM in their own timezone.
"""

__version__ = "1.0.0"
