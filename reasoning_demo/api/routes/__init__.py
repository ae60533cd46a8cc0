"""API route handlers for reasoning-demo.

Routes:
- session: /v1/modes, /v1/mode, /v1/submit, /v1/cancel, /v1/output
- health: /health, /health/ready
"""

__all__: list[str] = []
