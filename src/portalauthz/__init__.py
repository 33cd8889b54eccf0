"""Portal authorization core - role-based access control for the university portal."""

__version__ = "0.1.0"
