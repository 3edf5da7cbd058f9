"""Framework integrations for the categories API."""
