"""LLM task package.

This package provides a unified interface for all generation tasks:

  from src.llm import run_task

  result = await run_task(TaskType.OUTLINE_DAY, context)
  result.data   # validated OutlineResponse
  result.meta   # provider, model, retries, escalated

Architecture:
  providers/    → Generation backends behind one interface + registry
  parser.py     → JSON extraction from raw LLM output
  validators.py → Structural (schema) and semantic (business rule) checks
  router.py     → Model sequence, invoke-validate-fix-retry loop

The router implements defense-in-depth:
  1. PROMPT: Tell the LLM exactly what shape to produce
  2. PARSE: Extract JSON, handling markdown wrappers and preamble
  3. SCHEMA: Validate against the task's Pydantic model
  4. SEMANTIC: Campaign rules (scope, guardrails, alignment)
  5. RETRY: On failure, retry with a fix prompt listing every error,
     escalating narrow tasks to the large model on the last attempt
"""

# Orchestration
from src.llm.router import (
    run_task,
    build_model_sequence,
    PlannedAttempt,
)

# Providers
from src.llm.providers import (
    PROVIDERS,
    GenerationProvider,
    get_provider,
    register_provider,
)

# Parsing utilities
from src.llm.parser import (
    extract_json,
    extract_json_text,
    JSONExtractionError,
)

# Validators
from src.llm.validators import (
    validate_output,
    validate_outline_rules,
    validate_post_text,
    ValidationResult,
    ValidationSuccess,
    ValidationFailure,
)

__all__ = [
    # Router
    "run_task",
    "build_model_sequence",
    "PlannedAttempt",
    # Providers
    "PROVIDERS",
    "GenerationProvider",
    "get_provider",
    "register_provider",
    # Parser
    "extract_json",
    "extract_json_text",
    "JSONExtractionError",
    # Validators
    "validate_output",
    "validate_outline_rules",
    "validate_post_text",
    "ValidationResult",
    "ValidationSuccess",
    "ValidationFailure",
]
