# Business Services
from app.services.user_service import UserService

__all__ = ['UserService']
