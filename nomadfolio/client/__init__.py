"""
Nomadfolio Client
=================

Python client for the portfolio API plus the pure view logic a front end
needs: search/tag filtering, hidden admin entry and per-screen view state.
"""

from .api import APIRequestError, PortfolioClient
from .session import Session, SessionStore
from .filters import collect_tags, filter_projects

__all__ = ['APIRequestError', 'PortfolioClient', 'Session', 'SessionStore', 'collect_tags', 'filter_projects']
