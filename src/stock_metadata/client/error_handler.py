"""Error translation for Gemini generation requests"""  # noqa: D415

from google.genai import errors as genai_errors

from stock_metadata.credentials import mask_key
from stock_metadata.exceptions import ProviderError


def to_provider_error(
    error: Exception,
    *,
    api_key: str,
    content_type: str = "unknown",
) -> ProviderError:
    """Turn an SDK or transport exception into an informative `ProviderError`.

    The returned error is meant to be raised with ``from error`` by the caller.
    """
    if isinstance(error, ProviderError):
        return error

    hint = mask_key(api_key)
    code = error.code if isinstance(error, genai_errors.APIError) else None
    error_str = str(error).lower()

    if (
        code in (401, 403)
        or "api key not valid" in error_str
        or "permission" in error_str
    ):
        message = f"Authentication failed for key {hint}. Original error: {error}"
    elif code == 429 or "quota" in error_str or "resource_exhausted" in error_str:
        message = (
            f"Quota or rate limit exceeded for key {hint}. Original error: {error}"
        )
    elif isinstance(error, genai_errors.ServerError):
        message = f"Provider unavailable ({code}). Original error: {error}"
    elif "json" in error_str or "schema" in error_str:
        message = (
            f"Structured output generation failed for {content_type} content. "
            f"Original error: {error}"
        )
    else:
        message = f"Content generation failed for {content_type}: {error}"
    return ProviderError(message, api_key_hint=hint)
