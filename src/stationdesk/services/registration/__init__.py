"""Package registration helpers."""

from .service import RangeFullError, RegistrationError, register_package, suggest_code

__all__ = ["RangeFullError", "RegistrationError", "register_package", "suggest_code"]
