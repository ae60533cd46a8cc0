"""HTTP API for reasoning-demo."""
