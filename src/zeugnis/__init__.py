"""
Report card assistant engine.

Timestamped competency ratings for primary school report cards, kept per
class in one local JSON document.
"""

__version__ = "3.0.0"
