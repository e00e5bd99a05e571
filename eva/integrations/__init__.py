"""Outbound HTTP clients: the model API (server side) and the EVA server (plugin side)."""
