"""Services for reasoning-demo.

Modules:
- availability: AvailabilityGate and the local model availability check
- task_controller: TaskController, the single-run lifecycle
- output_panel: OutputPanel, the RunListener behind the HTTP surface
"""

__all__: list[str] = []
