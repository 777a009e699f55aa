"""Interior design studio website API."""
