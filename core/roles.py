from enum import Enum


class UserRole(str, Enum):
    """User roles"""
    ADMIN = "admin"  # Room maintenance (cleanup, expiry processing)
    USER = "user"    # Regular cuber

    @classmethod
    def get_hierarchy(cls) -> dict:
        """Higher roles include the permissions of lower ones"""
        return {
            cls.ADMIN: [cls.ADMIN, cls.USER],
            cls.USER: [cls.USER],
        }

    @classmethod
    def has_permission(cls, user_role: str, required_role: str) -> bool:
        hierarchy = cls.get_hierarchy()
        return required_role in hierarchy.get(user_role, [])
