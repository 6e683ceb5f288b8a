"""Command groups attached to the fieldguide CLI."""
