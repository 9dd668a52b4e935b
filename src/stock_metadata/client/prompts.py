"""Prompt and response-schema construction for metadata generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from google.genai import types

from stock_metadata.constants import ADOBE_STOCK_CATEGORIES, MIN_TITLE_LENGTH

if TYPE_CHECKING:
    from stock_metadata.core.types import GenerationSettings

_IMAGE_INSTRUCTION = "Analyze the provided image."
_VIDEO_INSTRUCTION = "Based on the video filename, infer its content."


def build_prompt(file_name: str, settings: GenerationSettings) -> str:
    """Build the generation prompt for one file.

    Images are analyzed from their bytes; videos are described from the
    filename alone, so the instruction differs by content type.
    """
    description = (
        _IMAGE_INSTRUCTION if settings.content_type == "image" else _VIDEO_INSTRUCTION
    )
    categories = ", ".join(ADOBE_STOCK_CATEGORIES)
    return (
        f"You are an expert metadata generator for Adobe Stock. {description}\n"
        f'The file name is "{file_name}".\n\n'
        "Generate metadata that strictly adheres to the following rules, "
        "in the specified JSON format.\n\n"
        "RULES:\n"
        f"1. Title: Must be between {MIN_TITLE_LENGTH} and {settings.title_length} "
        "characters long. It should be descriptive, concise, and SEO-friendly.\n"
        f"2. Keywords: Generate exactly {settings.keyword_count} keywords. Order "
        "them from most to least relevant. Include synonyms, conceptual terms, "
        "and variations.\n"
        "3. Category: Select the single most relevant category from this exact "
        f"list: [{categories}].\n"
        "4. Content: All metadata must strictly and accurately describe the "
        "visual content.\n"
        "5. Restrictions: Do not include watermarks, brand names, or any "
        "prohibited terms.\n"
        "6. Response Format: Respond ONLY with a valid JSON object matching the "
        "provided schema. Do not include any other text, markdown, or "
        "explanations.\n"
    )


def build_response_schema() -> types.Schema:
    """Structured-output schema matching `MetadataResult`."""
    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "file_name": types.Schema(type=types.Type.STRING),
            "title": types.Schema(type=types.Type.STRING),
            "keywords": types.Schema(
                type=types.Type.ARRAY,
                items=types.Schema(type=types.Type.STRING),
            ),
            "category": types.Schema(
                type=types.Type.STRING,
                enum=list(ADOBE_STOCK_CATEGORIES),
            ),
        },
        required=["file_name", "title", "keywords", "category"],
    )
