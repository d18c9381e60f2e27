import pytest
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from ovr_core.audit.models import AuditAction, AuditLog
from ovr_core.comments.models import CommentKind
from ovr_core.comments.selectors import list_comments
from ovr_core.comments.services import CommentService
from ovr_core.conftest import principal_of

pytestmark = pytest.mark.django_db


def test_add_trims_and_audits(incident, user):
    comment = CommentService.add(
        incident_id=incident.id,
        principal=principal_of(user),
        author=user,
        content="  Follow-up scheduled with the ward manager.  ",
    )

    assert comment.content == "Follow-up scheduled with the ward manager."
    assert comment.kind == CommentKind.COMMENT
    entry = AuditLog.objects.get(action=AuditAction.ADD_COMMENT)
    assert entry.entity_id == str(incident.id)
    assert entry.details["comment_id"] == comment.id


def test_empty_content_is_rejected(incident, user):
    with pytest.raises(ValidationError):
        CommentService.add(incident_id=incident.id, principal=principal_of(user), author=user, content=" \n ")
    assert list_comments(incident_id=incident.id).count() == 0


def test_other_facility_cannot_comment(incident, other_user):
    with pytest.raises(PermissionDenied):
        CommentService.add(
            incident_id=incident.id,
            principal=principal_of(other_user),
            author=other_user,
            content="Not my incident",
        )


def test_unknown_incident(user):
    with pytest.raises(NotFound):
        CommentService.add(incident_id=424242, principal=principal_of(user), author=user, content="hello")


def test_admin_comments_anywhere(make_incident, other_facility, other_user, admin_user):
    incident = make_incident(other_facility, reporter=other_user)
    comment = CommentService.add(
        incident_id=incident.id,
        principal=principal_of(admin_user),
        author=admin_user,
        content="Reviewed by quality department.",
    )
    assert comment.author_id == admin_user.id


def test_list_is_chronological_and_mixes_system_notes(incident, user):
    p = principal_of(user)
    CommentService.add(incident_id=incident.id, principal=p, author=user, content="one")
    CommentService.add_system(incident=incident, author=user, content="Closure requested. Reason: done")
    CommentService.add(incident_id=incident.id, principal=p, author=user, content="three")

    rows = list(list_comments(incident_id=incident.id))
    assert [c.content for c in rows] == ["one", "Closure requested. Reason: done", "three"]
    assert [c.kind for c in rows] == ["comment", "system", "comment"]


def test_comment_survives_author_deletion(incident, user):
    comment = CommentService.add(incident_id=incident.id, principal=principal_of(user), author=user, content="hi")
    user.delete()
    comment.refresh_from_db()
    assert comment.author_id is None
