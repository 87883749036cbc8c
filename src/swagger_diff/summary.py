"""Changelog summarizer: turns a change set into a short prose release note."""

import structlog
from litellm import completion

from swagger_diff.config import get_settings
from swagger_diff.diff.changes import ChangeSet
from swagger_diff.render.markdown import render_markdown

logger = structlog.get_logger()

NO_CHANGES = "No API changes detected."

SYSTEM_PROMPT = """You are writing release notes for an HTTP API.

You receive a Markdown changelog with three sections:
- "What's New": endpoints that were added
- "What's Deprecated": endpoints that were removed
- "What's Changed": endpoints whose parameters or response fields changed

Write a short summary (at most 8 sentences) for API consumers. Mention removed
endpoints, removed parameters and removed response fields first. Do not invent
changes that are not in the changelog. Output plain text only."""


class ChangelogSummarizer:
    """Summarizes a ChangeSet with any model litellm can reach."""

    def __init__(self, model: str | None = None):
        self.model = model or get_settings().llm_model

    def summarize(self, change_set: ChangeSet) -> str:
        """Return a prose summary, or NO_CHANGES without calling the model."""
        if change_set.is_empty:
            return NO_CHANGES

        changelog = render_markdown(change_set)
        logger.debug(
            "Requesting changelog summary",
            model=self.model,
            new=len(change_set.new_endpoints),
            missing=len(change_set.missing_endpoints),
            changed=len(change_set.changed_endpoints),
        )
        response = completion(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": changelog},
            ],
        )
        return (response.choices[0].message.content or "").strip()
