"""Client for the external dashboard packaging service."""
