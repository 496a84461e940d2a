"""
Health Check

Performs a connectivity and credential check for the configured model
before the session starts.
"""

from yomitore.domain.entities import HealthCheckResult
from yomitore.infrastructure.model_clients.base import ModelClient


HEALTH_CHECK_PROMPT = "Reply with only 'OK' if you can read this message."


def health_check_model(client: ModelClient) -> HealthCheckResult:
    """
    Execute a health check for a single model client.

    Args:
        client: Model client to check

    Returns:
        HealthCheckResult: Health check result
    """
    model_name = getattr(client, "model_name", "unknown")
    try:
        response = client.generate(HEALTH_CHECK_PROMPT)
    except Exception as e:
        return HealthCheckResult(
            model_name=model_name,
            success=False,
            latency_ms=None,
            error=str(e),
        )

    if not response.output.strip():
        return HealthCheckResult(
            model_name=model_name,
            success=False,
            latency_ms=response.latency_ms,
            error=f"{model_name} returned an empty response",
        )
    return HealthCheckResult(
        model_name=model_name,
        success=True,
        latency_ms=response.latency_ms,
        error=None,
    )


def describe_failure(result: HealthCheckResult) -> str:
    """Build a troubleshooting message for a failed check"""
    # Display only the first 200 characters of the error message
    error_short = result.error[:200] if result.error else "Unknown error"
    return (
        f"Health check for {result.model_name} failed.\n"
        f"Error: {error_short}\n\n"
        f"Troubleshooting:\n"
        f"- For Groq: Set the GROQ_API_KEY environment variable (or add it to .env)\n"
        f"- For Claude models: Set the ANTHROPIC_API_KEY environment variable\n"
        f"- To try the trainer without a network connection, run with --offline"
    )
