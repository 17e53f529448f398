"""
py-frontline: territorial region grid, team registry and map marker sync.
"""

__version__ = "0.1.0"
