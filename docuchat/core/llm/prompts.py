"""Prompts for OCR extraction and document translation.

Both prompts are kept as lists of requirement lines so individual
requirements can be reviewed and changed without touching the builders.
"""

from typing import Optional

# Vision OCR: extract everything, translate nothing
OCR_PROMPT_PARTS = [
    "Extract ALL text from this document and format it as clean, accurate markdown.",
    "",
    "CRITICAL REQUIREMENTS:",
    "1. Extract EVERY piece of text visible in the document - do not skip or summarize anything",
    "2. Preserve the exact structure and layout of the document",
    "3. Maintain proper hierarchy with markdown headings (use #, ##, ### appropriately)",
    "4. Use **bold** for emphasized or bold text",
    "5. Use tables (| ... |) for tabular data",
    "6. Use lists (-, *, 1.) for listed items",
    "7. Preserve all numbers, dates, and identifiers EXACTLY as shown",
    "8. Do NOT add any explanations, comments, or interpretations",
    "9. Do NOT translate or modify the text - keep it in the original language",
    "10. Output ONLY the extracted markdown - nothing else",
    "",
    "Your response should be pure markdown that accurately represents the complete document.",
]

OCR_PROMPT = "\n".join(OCR_PROMPT_PARTS)

# Translation: faithful 1-to-1 official translation
TRANSLATION_REQUIREMENTS = [
    "1. Provide a faithful and exact 1-to-1 official translation",
    "2. Do NOT make any changes, additions, or omissions in the translation",
    "3. Preserve the EXACT same format as the source text (markdown formatting, headings, tables, lists, etc.)",
    "4. Keep all markdown syntax intact (# headings, **bold**, | tables |, - lists, etc.)",
    "5. Maintain the same structure and layout as the original",
    "6. NEVER wrap the response in markdown code blocks (```markdown or ```)",
    "7. NEVER wrap the response in text blocks or any other formatting",
    "8. Output ONLY the translated text in markdown format directly",
    "9. Preserve all numbers, dates, identifiers, and formatting EXACTLY",
    "10. The output must be ready to display as-is, with the same format as the source",
]

# Context section header
CONTEXT_HEADER = "Context (do not translate):"

# Source text header
SOURCE_HEADER = "Text to translate:"


def build_translation_prompt(
    markdown: str,
    target_language_name: str,
    context: Optional[str] = None,
) -> str:
    """Build the translation prompt for one document.

    Args:
        markdown: Source text in markdown
        target_language_name: Human-readable target language, e.g. "French"
        context: Optional background for the translator

    Returns:
        Prompt text
    """
    parts = [
        f"You are a professional translator. Translate the following text to {target_language_name}.",
        "",
        "CRITICAL REQUIREMENTS:",
        *TRANSLATION_REQUIREMENTS,
        "",
    ]
    if context:
        parts.extend([CONTEXT_HEADER, context, ""])
    parts.extend([SOURCE_HEADER, "", markdown])
    return "\n".join(parts)
