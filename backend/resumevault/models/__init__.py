from resumevault.models.user import User

__all__ = ["User"]
