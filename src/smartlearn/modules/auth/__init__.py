"""Authentication module - sign-up verification, login and sessions."""
