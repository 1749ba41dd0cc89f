"""Sessions and role checks."""
