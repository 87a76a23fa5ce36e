"""Small shared helpers (time, password hashing)."""
