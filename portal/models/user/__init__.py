from portal.models.user.profile import Profile

__all__ = ["Profile"]
