"""Vocal Phrases - Lyric phrase segmentation for vocal recording sessions.

Cuts song lyrics into singable phrases so each phrase can be rated across
recorded takes:
1. Segmentation: morphological grouping of each lyric line, with rehearsal
   marks such as 【Aメロ】 kept as section separators
2. Editing: split, merge, line removal and marker insertion, keeping
   take annotations consistent
"""

__version__ = "0.1.0"
