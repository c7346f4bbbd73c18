"""mpegjoin: concatenate MPEG audio files without re-encoding.

Recommended entry point:
- mpegjoin.mp3.Mp3Merger
"""

__version__ = "0.1.0"
