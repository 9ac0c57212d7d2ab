from unittest.mock import patch

from portal.core.exceptions import RepositoryError
from portal.services.reservation import RecipientResolver


def test_profile_email_preferred(store, make_reservation, profile):
    reservation = make_reservation()

    assert RecipientResolver(store).resolve(reservation) == profile.email


def test_falls_back_to_requester_name(store, make_reservation):
    reservation = make_reservation(profile_id=None, requester_name=" Ana Souza ")

    assert RecipientResolver(store).resolve(reservation) == "Ana Souza"


def test_profile_without_email_falls_back(store, make_reservation, profile, db_session):
    profile.email = None
    db_session.commit()
    reservation = make_reservation()

    assert RecipientResolver(store).resolve(reservation) == "Ana Souza"


def test_no_recipient(store, make_reservation):
    reservation = make_reservation(profile_id=None, requester_name=None)

    assert RecipientResolver(store).resolve(reservation) is None


def test_profile_read_error_is_swallowed(store, make_reservation):
    reservation = make_reservation()

    with patch.object(store, "read", side_effect=RepositoryError("down")):
        assert RecipientResolver(store).resolve(reservation) == "Ana Souza"
