from .user import User
from .property import Property
from .property_like import PropertyLike
from .contact import Contact

__all__ = ['User', 'Property', 'PropertyLike', 'Contact']
