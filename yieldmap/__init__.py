"""yieldmap - resilient dividend fundamentals pipeline and snapshot job"""

__version__ = "1.0.0"
