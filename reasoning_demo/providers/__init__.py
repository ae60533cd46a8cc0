"""Language model clients for reasoning-demo.

Providers:
- base: ModelClient ABC, GenerationOptions, ModelMetadata
- llamacpp: LlamaCppClient (llama-cpp-python + Metal)
"""

from reasoning_demo.providers.base import GenerationOptions, ModelClient, ModelMetadata
from reasoning_demo.providers.llamacpp import LlamaCppClient, llama_cpp_installed


__all__: list[str] = [
    "GenerationOptions",
    "LlamaCppClient",
    "ModelClient",
    "ModelMetadata",
    "llama_cpp_installed",
]
