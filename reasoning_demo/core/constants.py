"""Fixed texts and defaults for reasoning-demo.

This module centralizes the instruction texts sent to the model, the
user-visible status strings and the service defaults, so orchestration,
the task controller and the HTTP layer all agree on them.

Usage:
    from reasoning_demo.core.constants import COT_INSTRUCTION, STATUS_CANCELED
"""

# =============================================================================
# Model Instructions
# =============================================================================

ZERO_SHOT_INSTRUCTION = ""

COT_INSTRUCTION = "Let's think step by step."

SELF_CONSISTENCY_EVALUATION_INSTRUCTION = (
    "You are provided with three solutions to the same problem. "
    "Compare every solution to each other and choose the most common solution. "
    "Your output should be a unified answer consisting of the two solutions, "
    "which are the most similar in their results. "
    "Always include the result itself in your output."
)

SELF_CONSISTENCY_RESULT_INSTRUCTION = (
    "You are provided with two similar solutions to the same question. "
    "Rephrase them into one unified answer and output only that unified "
    "definitive answer/solution. Do not mention your evaluation process or "
    "that there were more than one solution. "
    "Always include the result itself in your output."
)

# "SOLUTION 1: <a> SOLUTION 2: <b> SOLUTION 3: <c>"
SOLUTION_TAG_TEMPLATE = "SOLUTION {index}: {answer}"

SELF_CONSISTENCY_SAMPLES = 3


# =============================================================================
# User-visible Status Strings
# =============================================================================

STATUS_IDLE = "Output will appear here."
STATUS_LOADING_ZERO_SHOT = "Loading Zero-Shot..."
STATUS_LOADING_ZERO_SHOT_COT = "Loading Zero-Shot-CoT..."
STATUS_LOADING_INITIAL_ANSWERS = "Loading initial answers...(1-3/5)"
STATUS_LOADING_EVALUATION = "Loading evaluation...(4/5)"
STATUS_LOADING_RESULT = "Loading final answer...(5/5)"
STATUS_CANCELED = "Canceled."
STATUS_EMPTY_INPUT = "Please enter a question."
STATUS_NO_MODE = "Please select a mode"
ERROR_PREFIX = "Error: "


# =============================================================================
# Service Defaults
# =============================================================================

DEFAULT_SERVICE_NAME = "reasoning-demo"
DEFAULT_PORT = 8086
DEFAULT_HOST = "127.0.0.1"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_MODEL_PATH = "models/model.gguf"
DEFAULT_MODEL_ID = "local-model"
DEFAULT_CONTEXT_LENGTH = 4096
DEFAULT_GPU_LAYERS = -1  # All layers on GPU/Metal

# Sampling is fixed for the process lifetime
DEFAULT_TOP_K = 5
DEFAULT_TEMPERATURE = 0.2
