"""
Commerce Desk.

Operator assistant for multi-marketplace sellers: turns a catalog sheet into
Amazon/Flipkart/Meesho/Myntra listing packs, turns performance snapshots into
prioritized tasks, and answers operator commands with live context.
"""

__version__ = "1.0.0"
__author__ = "Commerce Desk Team"

# Lazy imports to avoid circular dependencies
def get_session():
    """Get the DeskSession class (lazy import)."""
    from commerce_desk.session.desk import DeskSession
    return DeskSession

__all__ = ["get_session", "__version__"]
