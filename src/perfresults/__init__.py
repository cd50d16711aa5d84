"""Performance results toolkit.

Turns load-test and resource-usage output into validated CSV tables,
HTML reports and baseline/candidate comparisons.
"""

__version__ = "0.3.0"
