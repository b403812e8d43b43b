"""Entitlement lookup for the cosmetic PRO badge.

Authentication happens upstream; this module only answers whether an
already-identified user holds the PRO entitlement.
"""
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from common.logger import get_logger
from config.settings import PRO_USERS


class EntitlementProvider(ABC):
    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def is_pro(self, email: Optional[str]) -> bool:
        pass


class StaticEntitlementProvider(EntitlementProvider):
    """Reads PRO users from the PRO_USERS setting (comma-separated emails)."""

    def __init__(self, pro_users: Optional[Iterable[str]] = None):
        super().__init__()
        users = PRO_USERS if pro_users is None else pro_users
        self.pro_users = frozenset(u.strip().lower() for u in users if u.strip())

    def is_pro(self, email: Optional[str]) -> bool:
        if not email:
            return False
        return email.strip().lower() in self.pro_users
