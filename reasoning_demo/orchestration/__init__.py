"""Prompt orchestration for reasoning-demo.

Modules:
- orchestrator: PromptOrchestrator dispatcher
- strategy: Mode enum and StrategySelector
- context: Run state and cancellation checks
- modes/: Prompting mode implementations
"""

__all__: list[str] = []
