from photoshare.models.user import User
from photoshare.models.photo import Photo

__all__ = ["User", "Photo"]
