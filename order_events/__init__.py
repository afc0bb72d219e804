"""
Order events: Dapr pub/sub producer and consumer for order.created
"""

__version__ = "1.0.0"
