import pytest

from ...registrations.routes import router as registrations_router
from ..routes import router as payments_router


@pytest.fixture
def participant(api_client):
    return api_client(registrations_router, payments_router, email="p1@x.com")


def _register(client, camp_id):
    resp = client.post("/registered-camps", json={
        "campId": str(camp_id),
        "participantEmail": "p1@x.com",
        "participantName": "Participant One",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_payment_intent_returns_client_secret(participant, fake_gateway):
    resp = participant.post("/create-payment-intent", json={"campFees": 50})

    assert resp.status_code == 200, resp.text
    assert resp.json() == {"clientSecret": "pi_test_5000_secret"}
    assert fake_gateway.amounts == [5000]


def test_create_payment_intent_rejects_non_numeric_fee(participant, fake_gateway):
    resp = participant.post("/create-payment-intent", json={"campFees": "fifty"})

    assert resp.status_code == 400
    assert fake_gateway.amounts == []


@pytest.mark.parametrize("fee", ["1e999999", 1_000_000])
def test_create_payment_intent_rejects_fee_above_maximum_charge(participant, fake_gateway, fee):
    resp = participant.post("/create-payment-intent", json={"campFees": fee})

    assert resp.status_code == 400, resp.text
    assert "maximum charge" in resp.json()["detail"]
    assert fake_gateway.amounts == []


def test_create_payment_intent_requires_token(api_client):
    client = api_client(payments_router)

    resp = client.post("/create-payment-intent", json={"campFees": 50})

    assert resp.status_code == 401


def test_record_payment_flips_registration_to_paid(participant, seed_camp, fake_db):
    camp_id = seed_camp()
    registration = _register(participant, camp_id)

    resp = participant.post("/payments", json={
        "registrationId": registration["_id"],
        "amount": 50,
        "participantEmail": "p1@x.com",
        "campId": str(camp_id),
        "transactionId": "pi_abc",
    })

    assert resp.status_code == 201, resp.text
    assert resp.json()["paymentStatus"] == "paid"
    assert fake_db.registered_camps.find_one({})["paymentStatus"] == "paid"


def test_record_payment_for_another_participant_is_forbidden(participant, seed_camp):
    camp_id = seed_camp()
    registration = _register(participant, camp_id)

    resp = participant.post("/payments", json={
        "registrationId": registration["_id"],
        "amount": 50,
        "participantEmail": "p2@x.com",
        "campId": str(camp_id),
    })

    assert resp.status_code == 403


def test_payment_history_lists_own_payments(participant, seed_camp):
    camp_id = seed_camp()
    registration = _register(participant, camp_id)
    participant.post("/payments", json={
        "registrationId": registration["_id"],
        "amount": 50,
        "participantEmail": "p1@x.com",
        "campId": str(camp_id),
    })

    resp = participant.get("/payments/p1@x.com")

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    assert body["items"][0]["campName"] == "Free Eye Checkup"
