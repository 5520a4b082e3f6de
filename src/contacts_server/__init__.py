"""contacts-server: OAuth login and cookie sessions for the contacts web app."""

__version__ = "0.1.0"
