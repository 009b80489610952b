"""
Operator session state around the rule engine.
"""

from commerce_desk.session.desk import DeskSession

__all__ = ["DeskSession"]
