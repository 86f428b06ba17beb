"""
Review Notifier

GitHub review request → Slack direct message notifier
"""

__version__ = "1.0.0"

from .notifier import DeliveryError, Notifier

__all__ = ["DeliveryError", "Notifier", "__version__"]
