from recruitment_api.models.user import Role, User

__all__ = ["Role", "User"]
