"""Note endpoints — add a note with @mentions, retry notification fanout."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from sourcing.application.use_cases.add_note import AddNoteUseCase
from sourcing.domain.errors import DomainError
from sourcing.infrastructure.api.dependencies import Actor, get_actor, get_add_note_uc
from sourcing.infrastructure.api.errors import to_http
from sourcing.infrastructure.api.schemas import FanoutOut, NoteOut, NoteRequest

router = APIRouter(tags=["notes"])


@router.post("/assignments/{assignment_id}/notes", response_model=NoteOut, status_code=201)
async def add_note(
    assignment_id: int,
    payload: NoteRequest,
    actor: Actor = Depends(get_actor),
    uc: AddNoteUseCase = Depends(get_add_note_uc),
):
    """Save the note. A notification failure is returned in ``notification_error``."""
    try:
        result = await uc.execute(assignment_id, actor.user_id, payload.text)
    except DomainError as exc:
        raise to_http(exc) from exc
    return NoteOut(
        note_id=result.note_id,
        resolved_mention_count=result.resolved_mention_count,
        notifications_created=result.notifications_created,
        notification_error=result.notification_error,
    )


@router.post("/notes/{note_id}/fanout", response_model=FanoutOut)
async def retry_fanout(note_id: int, uc: AddNoteUseCase = Depends(get_add_note_uc)):
    try:
        result = await uc.retry_fanout(note_id)
    except DomainError as exc:
        raise to_http(exc) from exc
    return FanoutOut(
        note_id=result.note_id,
        resolved_mention_count=result.resolved_mention_count,
        notifications_created=result.notifications_created,
    )
