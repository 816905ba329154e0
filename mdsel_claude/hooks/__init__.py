"""Host hook integrations."""
