from __future__ import annotations

from ..auth.tokens import Identity
from ..common.serialization import fields_of
from .model import Lesson


def lesson_view(lesson: Lesson, identity: Identity) -> dict:
    """Lesson fields as ``identity`` may see them.

    Students never receive ``qr_code``: the code is only shown in the room.
    """

    data = fields_of(lesson)
    if not identity.is_teacher:
        data.pop("qr_code", None)
    return data
