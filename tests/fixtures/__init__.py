"""Shared pytest fixtures."""

from .client import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
from .services import *  # noqa: F401,F403
from .users import *  # noqa: F401,F403
