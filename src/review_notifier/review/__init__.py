"""
Review Request Resolution

This module reduces issue event histories to pending review requests.
"""

from .resolver import resolve_outstanding, resolve_pending, to_pending_requests

__all__ = ['resolve_outstanding', 'resolve_pending', 'to_pending_requests']
