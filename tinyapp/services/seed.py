"""
Demo Data

Registers a demo user owning a couple of sample links, so a freshly started
development server has something to show.
"""

from tinyapp.models import User
from tinyapp.services.link_store import LinkStore
from tinyapp.services.user_directory import UserDirectory

DEMO_LINKS = (
    "http://www.lighthouselabs.ca",
    "http://www.google.ca",
)


def seed_demo_data(links: LinkStore, users: UserDirectory, email: str, password: str) -> User:
    user = users.register(email, password)
    for long_url in DEMO_LINKS:
        links.create(long_url, user.id)
    return user
