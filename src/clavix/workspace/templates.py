"""Jinja2 templates for workspace documents."""

from jinja2 import DictLoader, Environment

SAVED_PROMPT_TEMPLATE = """\
---
id: {{ id }}
mode: {{ result.mode.value }}
intent: {{ result.intent.primary_intent.value }}
confidence: {{ result.intent.confidence }}
quality: {{ result.quality.overall }}
rating: {{ result.quality.rating.value }}
created: {{ created }}
clavix_version: {{ version }}
---

# Optimized Prompt

{{ result.enhanced }}

## Original Prompt

{{ result.original }}

## Quality

| Dimension | Score |
|-----------|-------|
{% for dimension, score in dimensions %}
| {{ dimension }} | {{ score }} |
{% endfor %}
| **overall** | **{{ result.quality.overall }}** |
{% if result.applied_patterns %}

## Applied Patterns

{% for pattern in result.applied_patterns %}
- **{{ pattern.name }}** ({{ pattern.impact.value }}): {{ pattern.description }}
{% endfor %}
{% endif %}
{% if result.quality.suggestions %}

## Suggestions

{% for suggestion in result.quality.suggestions %}
- {{ suggestion }}
{% endfor %}
{% endif %}
"""

INSTRUCTIONS_TEMPLATE = """\
## Clavix

This project uses Clavix (v{{ version }}) to turn rough requests into
structured prompts. Outputs are saved under `{{ prompts_path }}`.

{% for command, summary in commands %}
- `clavix {{ command }}`: {{ summary }}
{% endfor %}
"""

COMMAND_BODY_TEMPLATE = """\
# Clavix: {{ name }}

{{ summary[0] | upper }}{{ summary[1:] }}.

Run it from the project root with the user's request:

```bash
clavix {{ usage }}
```

{% if name == "analyze" %}
Show the user the detected intent and the quality table Clavix prints.
{% else %}
Show the user the optimized prompt and the quality table Clavix prints.
{% endif %}
{% if name == "fast" %}
If Clavix recommends deep mode, offer `/clavix{{ separator }}deep` before continuing.
{% endif %}
{% if related %}

Related commands: {{ related | map("format_command", separator) | join(", ") }}
{% endif %}
"""

COMMAND_FILE_TEMPLATE = """\
{% if frontmatter %}
---
description: {{ template.description }}
---

{% endif %}
{{ template.content }}"""

# (command name, CLI usage, summary)
COMMANDS = [
    ("fast", "fast \"<prompt>\"", "quick cleanup of a prompt, with a deep-mode recommendation when needed"),
    ("deep", "deep \"<prompt>\"", "thorough optimization with steps, scope and edge cases"),
    ("prd", "prd \"<notes>\"", "shape product notes into PRD sections"),
    ("summarize", "summarize -f <transcript>", "extract requirements from a conversation"),
    ("analyze", "analyze \"<prompt>\"", "show intent and quality without rewriting"),
]

INSTRUCTION_COMMANDS = [(usage, summary) for _, usage, summary in COMMANDS]


def _format_command(name: str, separator: str) -> str:
    return f"`/clavix{separator}{name}`"


def create_environment() -> Environment:
    env = Environment(
        loader=DictLoader({
            "saved_prompt.md.j2": SAVED_PROMPT_TEMPLATE,
            "instructions.md.j2": INSTRUCTIONS_TEMPLATE,
            "command_body.md.j2": COMMAND_BODY_TEMPLATE,
            "command.md.j2": COMMAND_FILE_TEMPLATE,
        }),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["format_command"] = _format_command
    return env
