"""
Sync Bridge - client-side synchronization layer for the management service.
"""

__version__ = "0.1.0"
