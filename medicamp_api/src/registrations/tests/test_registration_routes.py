import pytest

from ..routes import router


@pytest.fixture
def participant(api_client):
    return api_client(router, email="p1@x.com")


@pytest.fixture
def admin(api_client, seed_user):
    seed_user("admin@x.com", role="admin")
    return api_client(router, email="admin@x.com")


def _join(client, camp_id, email="p1@x.com"):
    return client.post("/registered-camps", json={
        "campId": str(camp_id),
        "participantEmail": email,
        "participantName": "Participant",
        "age": 34,
        "phone": "01700000000",
        "gender": "male",
        "emergencyContact": "01800000000",
    })


def test_join_camp_creates_registration_and_counts_participant(participant, seed_camp, fake_db):
    camp_id = seed_camp()

    resp = _join(participant, camp_id)

    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["campId"] == str(camp_id)
    assert body["paymentStatus"] == "unpaid"
    assert body["confirmationStatus"] == "pending"
    assert fake_db.camps.find_one({"_id": camp_id})["participantCount"] == 1


def test_join_unknown_camp_is_404(participant):
    resp = _join(participant, "64b7f0c2a1b2c3d4e5f60718")
    assert resp.status_code == 404


def test_join_twice_is_409(participant, seed_camp):
    camp_id = seed_camp()
    _join(participant, camp_id)

    resp = _join(participant, camp_id)

    assert resp.status_code == 409


def test_join_with_missing_fields_is_400(participant):
    resp = participant.post("/registered-camps", json={"campId": "abc"})
    assert resp.status_code == 400


def test_join_on_behalf_of_someone_else_is_forbidden(participant, seed_camp):
    resp = _join(participant, seed_camp(), email="p2@x.com")
    assert resp.status_code == 403


def test_list_own_registrations_with_search_and_pagination(participant, seed_camp):
    _join(participant, seed_camp(campName="Dental Care"))
    _join(participant, seed_camp(campName="Eye Care"))
    _join(participant, seed_camp(campName="Blood Drive"))

    resp = participant.get("/registered-camps/p1@x.com", params={"search": "care", "perPage": 1, "page": 2})

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    assert body["page"] == 2
    assert body["perPage"] == 1
    # Newest first: Eye Care, then Dental Care
    assert [item["campName"] for item in body["items"]] == ["Dental Care"]


def test_listing_another_participants_registrations_is_forbidden(participant):
    resp = participant.get("/registered-camps/p2@x.com")
    assert resp.status_code == 403


def test_mixed_case_domain_in_path_matches_stored_email(participant, admin, seed_camp):
    _join(participant, seed_camp(), email="p1@X.com")

    own = participant.get("/registered-camps/p1@X.COM")
    as_admin = admin.get("/registered-camps/p1@x.Com")

    assert own.status_code == 200, own.text
    assert own.json()["total"] == 1
    assert as_admin.json()["total"] == 1


def test_malformed_email_in_path_is_rejected(participant):
    assert participant.get("/registered-camps/not-an-email").status_code == 400


def test_admin_confirms_registration(participant, admin, seed_camp, fake_db):
    camp_id = seed_camp()
    _join(participant, camp_id)

    resp = admin.patch("/registered-camps/p1@x.com", json={"campId": str(camp_id), "confirmationStatus": "confirmed"})

    assert resp.status_code == 200, resp.text
    assert fake_db.registered_camps.find_one({})["confirmationStatus"] == "confirmed"


def test_confirmation_status_outside_enumeration_is_400(participant, admin, seed_camp):
    camp_id = seed_camp()
    _join(participant, camp_id)

    resp = admin.patch("/registered-camps/p1@x.com", json={"campId": str(camp_id), "confirmationStatus": "maybe"})

    assert resp.status_code == 400


def test_participant_cannot_confirm(participant, seed_camp):
    camp_id = seed_camp()
    _join(participant, camp_id)

    resp = participant.patch("/registered-camps/p1@x.com", json={"campId": str(camp_id), "confirmationStatus": "confirmed"})

    assert resp.status_code == 403


def test_cancel_removes_registration_and_releases_seat(participant, seed_camp, fake_db):
    camp_id = seed_camp()
    registration = _join(participant, camp_id).json()

    resp = participant.delete(f"/registered-camps/{registration['_id']}")

    assert resp.status_code == 200
    assert resp.json() == {"deletedCount": 1}
    assert fake_db.registered_camps.count_documents({}) == 0
    assert fake_db.camps.find_one({"_id": camp_id})["participantCount"] == 0


def test_cancel_unknown_registration_is_404(participant):
    resp = participant.delete("/registered-camps/64b7f0c2a1b2c3d4e5f60718")
    assert resp.status_code == 404


def test_admin_can_cancel_and_list_everyone(api_client, participant, admin, seed_camp):
    camp_id = seed_camp()
    registration = _join(participant, camp_id).json()
    other = api_client(router, email="p2@x.com")
    _join(other, camp_id, email="p2@x.com")

    listing = admin.get("/registered-camps")
    assert listing.status_code == 200
    assert listing.json()["total"] == 2

    assert other.delete(f"/registered-camps/{registration['_id']}").status_code == 403
    assert admin.delete(f"/registered-camps/{registration['_id']}").status_code == 200


def test_requests_without_token_are_401(api_client):
    client = api_client(router)
    assert client.get("/registered-camps/p1@x.com").status_code == 401
