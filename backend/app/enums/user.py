"""
User role enums
"""

import enum


class UserRole(str, enum.Enum):
    WORKER = "worker"
    EMPLOYER = "employer"
    ADMIN = "admin"
