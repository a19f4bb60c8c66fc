"""
Event Services - order notifications over Redis pub/sub.
"""

from .publisher import schedule_order_event

__all__ = ["schedule_order_event"]
