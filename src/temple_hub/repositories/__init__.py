"""Repositories wrapping table access behind small, session-bound classes."""

from .application_repo import ApplicationRepository
from .community_repo import CommunityRepository
from .membership_repo import MembershipRepository

__all__ = ["ApplicationRepository", "CommunityRepository", "MembershipRepository"]
