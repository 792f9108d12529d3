"""Dependency injection -- app.state instances exposed through FastAPI Depends

Instances are created in the lifespan handler and cleaned up on shutdown.
"""

from fastapi import Request
from linkops.core.store import StoreGroup
from linkops.linkcheck import LinkChecker


def get_store_group(request: Request) -> StoreGroup:
    """StoreGroup from app.state"""
    return request.app.state.store_group


def get_link_checker(request: Request) -> LinkChecker:
    """LinkChecker from app.state"""
    return request.app.state.link_checker
