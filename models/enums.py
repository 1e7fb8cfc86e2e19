from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# SCHOOL-WIDE ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """
    School-wide role. Declared lowest → highest privilege;
    core.roles.ROLE_PRECEDENCE is built from this order.
    """

    teacher = "teacher"
    admin = "admin"
    superadmin = "superadmin"


# -----------------------------------------------------
# REDIRECT KIND
# -----------------------------------------------------
class RedirectKind(BaseStrEnum):
    """Where a user should land after login or a module switch."""

    school_setup = "school_setup"
    school_selection = "school_selection"
    module_selection = "module_selection"
    direct_module = "direct_module"
