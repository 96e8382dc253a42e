"""Investment research analytics core.

Portfolio risk metrics, sector rotation signals and news sentiment, served
through a cache-aside layer.
"""

__version__ = "0.1.0"
