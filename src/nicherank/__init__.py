"""NicheRank: discover and rank the top websites for a niche."""

__version__ = "0.1.0"
