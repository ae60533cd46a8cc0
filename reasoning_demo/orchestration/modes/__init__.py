"""Prompting mode implementations.

Modes:
- single: Zero-shot and zero-shot CoT (one call)
- self_consistency: 3 parallel CoT samples → Evaluate → Finalize
"""

__all__: list[str] = []
