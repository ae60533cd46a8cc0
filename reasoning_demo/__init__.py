"""reasoning-demo: prompting strategies for a local on-device language model.

This package offers zero-shot, zero-shot chain-of-thought and self-consistency
prompting over a llama.cpp model, exposed through a small FastAPI service.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
