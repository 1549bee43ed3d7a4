"""ER diagram export."""
