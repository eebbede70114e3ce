from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from pr_tracker.core.errors import DuplicateCode, InvalidInput, NotFound, UnknownCode
from pr_tracker.models import PurchaseRequest
from pr_tracker.services.purchase_request_service import (
    create_purchase_request,
    delete_purchase_request,
    get_purchase_request,
    list_purchase_requests,
    update_purchase_request,
)


def _create(db, **overrides):
    fields = dict(
        property_reference="UPRN-1",
        location="Raqqa",
        department="Health",
        estimated_amount=Decimal("100.00"),
        requester="Field Office",
    )
    fields.update(overrides)
    return create_purchase_request(db, **fields)


def test_create_stamps_sequence_and_code(db):
    pr = _create(db)
    assert pr.pr_id == 1
    assert pr.code == "RAQ-HEA-0001"
    assert pr.status == "pending"
    assert pr.dateRequested is not None
    assert pr.createdAt is not None and pr.updatedAt is not None

    second = _create(db, location="Hassaka", department="WASH")
    assert second.pr_id == 2
    assert second.code == "HSK-WSH-0002"


@pytest.mark.parametrize("overrides", [
    {"location": "Aleppo"},
    {"department": "Finance"},
])
def test_unknown_code_does_not_consume_a_number(db, counter_value, overrides):
    _create(db)
    assert counter_value() == 1

    with pytest.raises(UnknownCode):
        _create(db, **overrides)

    assert counter_value() == 1
    assert _create(db).pr_id == 2


def test_rejected_create_on_fresh_store_leaves_no_counter(db, counter_value):
    with pytest.raises(UnknownCode):
        _create(db, location="Nowhere")
    assert counter_value() == 0
    assert db.query(PurchaseRequest).count() == 0


def test_concurrent_creates_never_share_a_code(session_factory):
    def worker(i):
        s = session_factory()
        try:
            pr = _create(s, property_reference=f"UPRN-{i}")
            return pr.pr_id, pr.code
        finally:
            s.close()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(worker, range(20)))

    codes = [code for _, code in results]
    ids = sorted(pr_id for pr_id, _ in results)
    assert len(set(codes)) == 20
    assert ids == list(range(1, 21))
    assert all(code == f"RAQ-HEA-{pr_id:04d}" for pr_id, code in results)


def test_duplicate_code_is_rejected_and_number_is_skipped(db, counter_value):
    # a row that already holds the code the counter will produce next
    db.add(PurchaseRequest(
        pr_id=900, code="RAQ-HEA-0001", location="Raqqa", department="Health",
        propertyReference="legacy", estimatedAmount=Decimal("1.00"), requester="import",
    ))
    db.commit()

    with pytest.raises(DuplicateCode):
        _create(db)
    assert counter_value() == 1

    pr = _create(db)
    assert pr.pr_id == 2
    assert pr.code == "RAQ-HEA-0002"


def test_get_round_trip(db):
    created = _create(db)
    fetched = get_purchase_request(db, created.id)
    assert fetched.code == created.code
    assert fetched.pr_id == created.pr_id
    assert fetched.estimatedAmount == Decimal("100.00")


def test_get_validates_id(db):
    with pytest.raises(InvalidInput):
        get_purchase_request(db, "not-an-id")
    with pytest.raises(NotFound):
        get_purchase_request(db, "f" * 32)


def test_update_never_touches_sequence_or_code(db):
    pr = _create(db)
    pr_id, code = pr.pr_id, pr.code

    updated = update_purchase_request(db, pr.id, {
        "requester": "Procurement",
        "location": "Hassaka",
        "status": "approved",
        "code": "XXX-YYY-9999",
        "pr_id": 77,
    })
    assert updated.requester == "Procurement"
    assert updated.location == "Hassaka"
    assert updated.status == "approved"
    assert updated.pr_id == pr_id
    assert updated.code == code


def test_update_rejects_unknown_codes_and_nulls(db):
    pr = _create(db)
    with pytest.raises(UnknownCode):
        update_purchase_request(db, pr.id, {"department": "Finance"})
    with pytest.raises(InvalidInput):
        update_purchase_request(db, pr.id, {"requester": None})

    db.expire_all()
    fresh = get_purchase_request(db, pr.id)
    assert fresh.department == "Health"
    assert fresh.requester == "Field Office"


def test_update_missing_record(db):
    with pytest.raises(NotFound):
        update_purchase_request(db, "a" * 32, {"requester": "x"})


def test_delete(db):
    pr = _create(db)
    delete_purchase_request(db, pr.id)
    with pytest.raises(NotFound):
        get_purchase_request(db, pr.id)
    with pytest.raises(NotFound):
        delete_purchase_request(db, pr.id)


def test_list_newest_first(db):
    first = _create(db)
    second = _create(db)
    third = _create(db)
    assert [p.id for p in list_purchase_requests(db)] == [third.id, second.id, first.id]
