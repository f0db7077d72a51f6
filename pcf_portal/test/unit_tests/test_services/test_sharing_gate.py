"""
Service tests for the sharing gate and pending status writes following kkb_fastapi pattern.
"""

import pytest

from pcf_portal.clients.exceptions import BackendAuthError
from pcf_portal.repositories import ProductRepository
from pcf_portal.services.sharing.pending_writes import PendingWriteStore
from pcf_portal.services.sharing.sharing_gate import (
    InvalidSharingTransition,
    LineItemNotFoundError,
    SharingGate,
    SharingRequestError,
)
from pcf_portal.test.factory.company import LineItemFactory, ProductFactory
from pcf_portal.test.factory.session import COMPANY_ID, SUPPLIER_ID
from pcf_portal.utils.constants import SharingStatus


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def gate(backend_client, session_context):
    return SharingGate(ProductRepository(backend_client, session_context))


@pytest.fixture
def bom(fake_backend):
    """Two BOM lines of product 1 whose supplier has not been asked."""
    items = [LineItemFactory(), LineItemFactory()]
    for item in items:
        fake_backend.add_product(SUPPLIER_ID, item.line_item_product)
    return items


def test_only_not_requested_to_pending_is_allowed():
    assert (
        SharingGate.transition(SharingStatus.NOT_REQUESTED, SharingStatus.PENDING)
        == SharingStatus.PENDING
    )

    for current in SharingStatus:
        for target in SharingStatus:
            if (current, target) == (SharingStatus.NOT_REQUESTED, SharingStatus.PENDING):
                continue
            with pytest.raises(InvalidSharingTransition):
                SharingGate.transition(current, target)


def test_can_view_only_when_accepted():
    assert SharingGate.can_view(SharingStatus.ACCEPTED)
    assert not SharingGate.can_view(SharingStatus.PENDING)
    assert not SharingGate.can_view(SharingStatus.REJECTED)
    assert not SharingGate.can_view(SharingStatus.NOT_REQUESTED)


@pytest.mark.asyncio
async def test_request_access_marks_only_that_item_pending(gate, bom, fake_backend):
    first, second = bom

    updated = await gate.request_access(bom, first.id)

    assert updated[0].product_sharing_request_status == SharingStatus.PENDING
    assert updated[1].product_sharing_request_status == SharingStatus.NOT_REQUESTED
    # The input list is not modified
    assert first.product_sharing_request_status == SharingStatus.NOT_REQUESTED

    product = first.line_item_product
    [sent] = fake_backend.requests_to(
        "POST", f"/companies/{SUPPLIER_ID}/products/{product.id}/request_access/"
    )
    assert sent.body == {"requester": COMPANY_ID}


@pytest.mark.asyncio
async def test_request_access_failure_leaves_list_unchanged(gate, bom, fake_backend):
    product = bom[0].line_item_product
    fake_backend.fail(
        "POST",
        f"/companies/{SUPPLIER_ID}/products/{product.id}/request_access/",
        status_code=500,
    )

    with pytest.raises(SharingRequestError):
        await gate.request_access(bom, bom[0].id)

    assert all(
        item.product_sharing_request_status == SharingStatus.NOT_REQUESTED for item in bom
    )


@pytest.mark.asyncio
async def test_request_access_network_failure(gate, bom, fake_backend):
    product = bom[0].line_item_product
    fake_backend.fail(
        "POST",
        f"/companies/{SUPPLIER_ID}/products/{product.id}/request_access/",
        network=True,
    )

    with pytest.raises(SharingRequestError):
        await gate.request_access(bom, bom[0].id)


@pytest.mark.asyncio
async def test_request_access_auth_failure_is_not_wrapped(gate, bom, fake_backend):
    product = bom[0].line_item_product
    fake_backend.fail(
        "POST",
        f"/companies/{SUPPLIER_ID}/products/{product.id}/request_access/",
        status_code=401,
        payload={"detail": "Token expired"},
    )

    with pytest.raises(BackendAuthError):
        await gate.request_access(bom, bom[0].id)


@pytest.mark.asyncio
async def test_request_access_twice_is_rejected(gate, bom, fake_backend):
    updated = await gate.request_access(bom, bom[0].id)

    with pytest.raises(InvalidSharingTransition):
        await gate.request_access(updated, bom[0].id)

    assert len(fake_backend.requests) == 1


@pytest.mark.asyncio
async def test_request_access_unknown_line_item(gate, bom, fake_backend):
    with pytest.raises(LineItemNotFoundError):
        await gate.request_access(bom, 424242)
    assert fake_backend.requests == []


@pytest.mark.asyncio
async def test_request_access_without_supplier(gate):
    line_item = LineItemFactory(line_item_product=ProductFactory(supplier=None))
    with pytest.raises(SharingRequestError):
        await gate.request_access([line_item], line_item.id)


def test_pending_write_overlays_stale_status():
    store = PendingWriteStore()
    item = LineItemFactory()
    store.record(COMPANY_ID, 1, item.id)

    [reconciled] = store.reconcile(COMPANY_ID, 1, [item])

    assert reconciled.product_sharing_request_status == SharingStatus.PENDING
    assert len(store) == 1


def test_pending_write_dropped_once_backend_reports_status():
    store = PendingWriteStore()
    item = LineItemFactory(product_sharing_request_status=SharingStatus.ACCEPTED)
    store.record(COMPANY_ID, 1, item.id)

    [reconciled] = store.reconcile(COMPANY_ID, 1, [item])

    assert reconciled.product_sharing_request_status == SharingStatus.ACCEPTED
    assert len(store) == 0


def test_pending_write_dropped_when_line_item_is_gone():
    store = PendingWriteStore()
    store.record(COMPANY_ID, 1, 77)

    assert store.reconcile(COMPANY_ID, 1, [LineItemFactory()])
    assert len(store) == 0


def test_pending_write_expires():
    clock = FakeClock()
    store = PendingWriteStore(ttl_seconds=60, clock=clock)
    item = LineItemFactory()
    store.record(COMPANY_ID, 1, item.id)

    clock.now += 61
    [reconciled] = store.reconcile(COMPANY_ID, 1, [item])

    assert reconciled.product_sharing_request_status == SharingStatus.NOT_REQUESTED
    assert store.get(COMPANY_ID, 1, item.id) is None


def test_recording_a_write_prunes_expired_writes_of_other_products():
    clock = FakeClock()
    store = PendingWriteStore(ttl_seconds=60, clock=clock)
    store.record(COMPANY_ID, 1, 10)
    store.record(99, 3, 30)

    clock.now += 61
    store.record(COMPANY_ID, 2, 20)

    assert len(store) == 1
    assert store.get(COMPANY_ID, 2, 20) is not None


def test_reconcile_prunes_expired_writes_of_other_products():
    clock = FakeClock()
    store = PendingWriteStore(ttl_seconds=60, clock=clock)
    store.record(COMPANY_ID, 1, 10)

    clock.now += 61
    store.reconcile(COMPANY_ID, 2, [])

    assert len(store) == 0


def test_pending_writes_are_scoped_per_company_and_product():
    store = PendingWriteStore()
    item = LineItemFactory()
    store.record(COMPANY_ID, 1, item.id)

    [other_company] = store.reconcile(99, 1, [item])
    [other_product] = store.reconcile(COMPANY_ID, 2, [item])

    assert other_company.product_sharing_request_status == SharingStatus.NOT_REQUESTED
    assert other_product.product_sharing_request_status == SharingStatus.NOT_REQUESTED
    assert len(store) == 1


def test_pending_write_store_from_config(test_config):
    assert PendingWriteStore.from_config(test_config).ttl_seconds == 300
