"""Domain repository interfaces.

The abstraction is defined here with abc.ABC and @abstractmethod.  The
concrete SQLAlchemy implementation lives in flexrepo/infrastructure/persistence/.
"""

from .base import Repository

__all__ = ["Repository"]
