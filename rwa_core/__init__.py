"""
RWA Fractional Ownership Core

Registers real-world asset records and governs the supply-bounded
mint, transfer, purchase and redemption of fractional ownership units.
"""

__version__ = "1.0.0"
