# skill_exchange/api/__init__.py
# This file makes the api directory a Python package.

from . import auth
from . import credits
from . import messages
from . import profiles
from . import requests
from . import reviews
from . import sessions
from . import skills
from . import tutors

__all__ = [
    "auth",
    "profiles",
    "skills",
    "tutors",
    "requests",
    "sessions",
    "credits",
    "messages",
    "reviews",
]
