"""Renders the canonical Jira description of a proposal.

The rendered text is compared byte for byte by Jira on every update, so it
must only depend on the proposal's identifier, URL and notes.
"""

from datetime import datetime, tzinfo
from functools import lru_cache
from typing import Sequence

import jinja2
import structlog

from tc39_jira_sync.schemas.proposal import NoteModel
from tc39_jira_sync.utils.constants import DEFAULT_REFERENCE_TIMEZONE
from tc39_jira_sync.utils.helpers import resolve_timezone
from tc39_jira_sync.utils.templates import TEMPLATES_DIRECTORY, construct_jinja2_template_from_file, render_template_with_context

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

DESCRIPTION_TEMPLATE_PATH = TEMPLATES_DIRECTORY / "proposal_description.j2"


@lru_cache(maxsize=1)
def get_description_template() -> jinja2.Template:
    """Return the description template, loading it on first use."""
    return construct_jinja2_template_from_file(DESCRIPTION_TEMPLATE_PATH)


def parse_note_timestamp(value: str | None, reference_timezone: tzinfo) -> datetime | None:
    """Parse an ISO-8601 note date into an aware datetime, or None if it does not parse.

    Dates and date-times without an offset are taken to be in the reference time zone.
    """
    if not value:
        return None
    try:
        timestamp = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=reference_timezone)
    return timestamp.astimezone(reference_timezone)


def sort_notes(notes: Sequence[NoteModel], reference_timezone: tzinfo) -> list[tuple[datetime, NoteModel]]:
    """Drop notes whose date does not parse and stable-sort the rest by date."""
    dated_notes: list[tuple[datetime, NoteModel]] = []
    for note in notes:
        timestamp = parse_note_timestamp(note.date, reference_timezone)
        if timestamp is None:
            logger.debug("Skipping note with unparsable date", note_date=note.date, note_url=note.url)
            continue
        dated_notes.append((timestamp, note))
    # list.sort is stable, so notes sharing a timestamp keep their dataset order.
    dated_notes.sort(key=lambda dated_note: dated_note[0])
    return dated_notes


def render_proposal_description(
    identifier: str,
    url: str | None,
    notes: Sequence[NoteModel],
    reference_timezone: str = DEFAULT_REFERENCE_TIMEZONE,
) -> str:
    """Render the description of a proposal's tracked issue.

    Example:
        id: proposal-foo
        url: https://github.com/tc39/proposal-foo
        notes:
          - 2024-02-06: https://github.com/tc39/notes/blob/main/meetings/2024-02/feb-6.md
    """
    tz = resolve_timezone(reference_timezone)
    context = {
        "identifier": identifier,
        "url": url or "",
        "notes": [
            {"date": timestamp.date().isoformat(), "url": note.url or ""}
            for timestamp, note in sort_notes(notes, tz)
        ],
    }
    return render_template_with_context(get_description_template(), context)
