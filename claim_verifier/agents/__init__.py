"""Search adapters and verification components."""
