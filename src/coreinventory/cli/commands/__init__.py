"""Commands registered on the inventory CLI app."""
