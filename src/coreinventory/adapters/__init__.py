"""Adapters implementing the ports in coreinventory.core.ports."""
