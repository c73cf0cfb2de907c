"""
Summary prompt templates.

Templates use positional placeholders, in either of two spellings:
    {0}  or %1$d   minimum description length
    {1}  or %2$d   maximum description length
    {2}  or %3$s   the content to summarize

Substitution is done with a regex rather than str.format so that any other
braces or percent signs in a custom template are left alone. The content is
inserted verbatim.
"""

import re

DEFAULT_MIN_LENGTH = 120
DEFAULT_MAX_LENGTH = 160

DEFAULT_SUMMARY_PROMPT = (
    "Summarize the following text into a concise meta description between {0} and {1} "
    "characters long. Focus on the main topic and keywords. Ensure the description flows "
    "naturally and avoid cutting words mid-sentence. Output only the description text "
    'itself, without any introductory phrases like "Here is the summary:": {2}'
)

# {0} {1} {2}, or the printf-style %1$d %2$d %3$s
_PLACEHOLDER_RE = re.compile(r"\{([012])\}|%([123])\$[ds]")
_CONTENT_PLACEHOLDERS = ("{2}", "%3$s")
CONTENT_PLACEHOLDER = "{2}"


def get_default_prompt_template() -> str:
    return DEFAULT_SUMMARY_PROMPT


def build_summary_prompt(
    content: str,
    template: str | None = None,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> str:
    """Fill a prompt template with the length window and the content.

    An empty or whitespace-only template falls back to the default. A custom
    template without a content placeholder gets the content appended.
    """
    template = template if template and template.strip() else DEFAULT_SUMMARY_PROMPT

    if not any(placeholder in template for placeholder in _CONTENT_PLACEHOLDERS):
        template = f"{template.rstrip()}\n\n{CONTENT_PLACEHOLDER}"

    values = (str(min_length), str(max_length), content)

    def substitute(match: re.Match[str]) -> str:
        if match.group(1) is not None:
            return values[int(match.group(1))]
        return values[int(match.group(2)) - 1]

    # Replacement via function so backslashes in content are not treated as group refs
    return _PLACEHOLDER_RE.sub(substitute, template)
