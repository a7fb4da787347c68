"""Unit tests for the User entity."""

from userbase.domain.entities import User


def test_default_constructor_has_no_identity():
    user = User()
    assert user.id is None
    assert user.is_new
    assert user.username is None


def test_explicit_identity_constructor():
    user = User(id=7)
    assert user.id == 7
    assert not user.is_new


def test_new_unsaved_sets_names_only():
    user = User.new_unsaved("Ada", "Lovelace")
    assert user.firstname == "Ada"
    assert user.lastname == "Lovelace"
    assert user.username is None
    assert user.id is None


def test_two_users_with_identity_seven_are_equal():
    assert User(id=7, firstname="Ada") == User(id=7, firstname="Grace")


def test_str_names_type_and_identity():
    assert str(User(id=42)) == (
        "Entity of type userbase.domain.entities.user.User with id: 42"
    )
    assert str(User()).endswith("with id: None")


def test_update_changes_only_given_fields():
    user = User(id=1, username="ada", firstname="Ada", lastname="Lovelace")
    user.update(lastname="King")
    assert user.username == "ada"
    assert user.firstname == "Ada"
    assert user.lastname == "King"
    assert user.id == 1
