"""
Auth Module - Roles
The closed set of user roles
"""

import enum


class Role(enum.Enum):
    ADMIN = 'admin'
    STAFF = 'staff'
    STUDENT = 'student'

    @classmethod
    def parse(cls, value):
        """
        Maps a stored role value to a Role

        Returns:
            Role|None: None when the value is not a known role
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


ROLE_VALUES = tuple(role.value for role in Role)
