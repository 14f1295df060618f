"""Desktop dashboard for the voting relay."""
