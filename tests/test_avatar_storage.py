import pytest

from skill_exchange.config import settings
from skill_exchange.exceptions import NotAuthorized, NotFound, ValidationFailed
from skill_exchange.services import avatar_storage, profile_service

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def bucket(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "AVATAR_DIR", str(tmp_path))
    return tmp_path


def test_owner_path_is_accepted():
    assert str(avatar_storage.check_owner("7/avatar.png", 7)) == "7/avatar.png"


@pytest.mark.parametrize("path", ["8/avatar.png", "78/avatar.png"])
def test_other_users_path_is_refused(path):
    with pytest.raises(NotAuthorized):
        avatar_storage.check_owner(path, 7)


@pytest.mark.parametrize("path", ["7", "/7/avatar.png", "7/../8/avatar.png", "7/sub/avatar.png", "../7/a.png"])
def test_malformed_paths_are_refused(path):
    with pytest.raises(ValidationFailed):
        avatar_storage.check_owner(path, 7)


def test_save_avatar_writes_under_owner_folder(bucket):
    url = avatar_storage.save_avatar(5, PNG_BYTES, "image/png")

    assert url == f"{settings.AVATAR_PUBLIC_PREFIX}/5/avatar.png"
    assert (bucket / "5" / "avatar.png").read_bytes() == PNG_BYTES
    assert avatar_storage.path_from_url(url) == "5/avatar.png"


def test_new_upload_keeps_previous_format_until_pruned(bucket):
    avatar_storage.save_avatar(5, PNG_BYTES, "image/png")
    url = avatar_storage.save_avatar(5, b"jpeg-bytes", "image/jpeg")

    assert sorted(p.name for p in (bucket / "5").iterdir()) == ["avatar.jpg", "avatar.png"]

    avatar_storage.prune_avatars(5, url)
    assert sorted(p.name for p in (bucket / "5").iterdir()) == ["avatar.jpg"]

    avatar_storage.prune_avatars(5, None)
    assert list((bucket / "5").iterdir()) == []


def test_save_avatar_validates_type_and_size(bucket, monkeypatch):
    with pytest.raises(ValidationFailed):
        avatar_storage.save_avatar(5, b"text", "text/plain")
    with pytest.raises(ValidationFailed):
        avatar_storage.save_avatar(5, b"", "image/png")

    monkeypatch.setattr(settings, "AVATAR_MAX_BYTES", 10)
    with pytest.raises(ValidationFailed):
        avatar_storage.save_avatar(5, PNG_BYTES, "image/png")


def test_resolve_avatar_is_owner_only(bucket):
    avatar_storage.save_avatar(5, PNG_BYTES, "image/png")

    with pytest.raises(NotAuthorized):
        avatar_storage.resolve_avatar(6, "5/avatar.png")

    assert avatar_storage.resolve_avatar(5, "5/avatar.png") == bucket / "5" / "avatar.png"

    with pytest.raises(NotFound):
        avatar_storage.resolve_avatar(5, "5/avatar.gif")


def test_prune_refuses_another_users_url(bucket):
    with pytest.raises(NotAuthorized):
        avatar_storage.prune_avatars(5, f"{settings.AVATAR_PUBLIC_PREFIX}/6/avatar.png")


def test_prune_without_owner_folder_is_a_no_op(bucket):
    avatar_storage.prune_avatars(9, None)
    assert not (bucket / "9").exists()


def test_profile_avatar_url_is_updated(db_session, make_member, bucket):
    member = make_member("Mia")
    url = avatar_storage.save_avatar(member.id, PNG_BYTES, "image/png")

    profile = profile_service.set_avatar_url(db_session, member.id, url)

    assert profile.avatar_url == url
