"""
Vault growth monitor: periodic vault balance / APY checks with growth updates.
"""

__version__ = "0.1.0"
