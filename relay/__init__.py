"""Stateless JSON relay for the voting contract."""
