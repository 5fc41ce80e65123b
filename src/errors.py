"""Error taxonomy for generation tasks.

Two kinds of failure exist:

  - Failures that stop a task immediately (ContractViolation, ProviderError).
    Retrying would not help: the caller passed the wrong context, or the
    backend is misconfigured or unimplemented.

  - Failures of one attempt's output (OutputValidationError and subclasses).
    These are fed back into the next attempt's fix prompt. When the attempt
    sequence runs out, the last one is wrapped in ExhaustedRetries.
"""

from typing import Optional


class GenerationError(Exception):
    """Base class for all generation task errors."""


class ContractViolation(GenerationError):
    """The task context does not fit the task type. Caller bug, never retried."""


# =============================================================================
# PROVIDER ERRORS
# =============================================================================

class ProviderError(GenerationError):
    """The generation backend could not produce text. Never retried."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class ProviderConfigurationError(ProviderError):
    """Unknown provider name or missing credential."""


class ProviderNotImplementedError(ProviderError):
    """The selected backend is a named stub without a transport."""


class ProviderTransportError(ProviderError):
    """The transport call itself failed (network, auth, rate limit, ...)."""


# =============================================================================
# OUTPUT ERRORS (retryable)
# =============================================================================

class OutputValidationError(GenerationError):
    """A single attempt's output was rejected.

    ``errors`` is the complete ordered list of problems found; it is reused
    verbatim in the next attempt's fix prompt.
    """

    stage = "validation"

    def __init__(self, errors: list[str]):
        super().__init__(" | ".join(errors))
        self.errors = list(errors)


class ExtractionError(OutputValidationError):
    """No JSON object could be recovered from the raw output."""

    stage = "extraction"


class StructuralError(OutputValidationError):
    """The JSON does not match the task's declared schema."""

    stage = "structural"


class SemanticError(OutputValidationError):
    """The payload is well-formed but breaks a business rule."""

    stage = "semantic"


class ExhaustedRetries(GenerationError):
    """Every attempt in the model sequence failed validation."""

    def __init__(
        self,
        task_type: str,
        errors: list[str],
        attempts: int,
        stage: Optional[str] = None,
    ):
        super().__init__(
            f"AI generation failed validation for {task_type}: {' | '.join(errors)}"
        )
        self.task_type = task_type
        self.errors = list(errors)
        self.attempts = attempts
        self.stage = stage
