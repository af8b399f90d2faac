"""
bookablehours - materialize bookable intervals from weekly availability rules.
"""

__version__ = "0.1.0"
