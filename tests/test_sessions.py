from core.db.users import sessions, user_store


def _user_id():
    return user_store.create_user(
        username="alice",
        email="alice@x.com",
        full_name="Alice",
        password_hash="x",
        avatar_url="https://cdn.example/a.png",
    )


def test_new_account_has_no_session():
    user_id = _user_id()
    assert sessions.current_session(user_id) == sessions.NoSession()
    assert sessions.get_refresh_token(user_id) is None


def test_persist_overwrites_previous_token():
    user_id = _user_id()
    sessions.persist_refresh_token(user_id, "t1")
    sessions.persist_refresh_token(user_id, "t2")
    assert sessions.current_session(user_id) == sessions.ActiveSession("t2")


def test_rotate_requires_current_value():
    user_id = _user_id()
    sessions.persist_refresh_token(user_id, "t2")

    assert sessions.rotate_refresh_token(user_id, "t1", "t3") is False
    assert sessions.get_refresh_token(user_id) == "t2"

    assert sessions.rotate_refresh_token(user_id, "t2", "t3") is True
    assert sessions.get_refresh_token(user_id) == "t3"

    # a second rotation presenting the same old value loses
    assert sessions.rotate_refresh_token(user_id, "t2", "t4") is False
    assert sessions.get_refresh_token(user_id) == "t3"


def test_rotate_without_session_fails():
    user_id = _user_id()
    assert sessions.rotate_refresh_token(user_id, "t1", "t2") is False
    assert sessions.current_session(user_id) == sessions.NoSession()


def test_clear_ends_session():
    user_id = _user_id()
    sessions.persist_refresh_token(user_id, "t1")
    sessions.clear_refresh_token(user_id)
    assert sessions.current_session(user_id) == sessions.NoSession()


def test_persist_leaves_password_hash_alone():
    user_id = _user_id()
    sessions.persist_refresh_token(user_id, "t1")
    assert user_store.get_user_by_id(user_id)["password_hash"] == "x"
