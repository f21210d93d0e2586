"""
Site adapters and the machinery around them.

Each adapter declares the capabilities it supports; the runner only calls
the operations an adapter declares.
"""

from .base import BaseSiteAdapter, Capability, CollectionState, QuestionRecord
from .browser import BrowserSession
from .driver import DriverMode, RouteKey
from .quora import QuoraAdapter
from .registry import get_adapter
from .runner import run_workflow

__all__ = [
    'BaseSiteAdapter',
    'BrowserSession',
    'Capability',
    'CollectionState',
    'DriverMode',
    'QuestionRecord',
    'QuoraAdapter',
    'RouteKey',
    'get_adapter',
    'run_workflow'
]
