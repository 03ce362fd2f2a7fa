from .base import BaseGolfModel
from .round import Round

__all__ = ["BaseGolfModel", "Round"]
