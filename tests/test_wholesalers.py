"""Tests for wholesaler endpoints."""

from decimal import Decimal

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories import WholesalerFactory


def wholesaler_payload(**overrides) -> dict:
    payload = {
        "name": "Sharma Traders",
        "phone": "9811122233",
        "address": "12 Market Road",
        "place": "Jaipur",
    }
    payload.update(overrides)
    return payload


class TestCreateWholesaler:
    """POST /wholesalers"""

    async def test_create(self, client: AsyncClient):
        response = await client.post("/wholesalers", json=wholesaler_payload(gst_number="08ABCDE1234F1Z5"))

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Sharma Traders"
        assert data["place"] == "Jaipur"
        assert data["gst_number"] == "08ABCDE1234F1Z5"
        assert data["is_deleted"] is False
        assert data["deleted_at"] is None

    async def test_initial_balance_is_payable(self, client: AsyncClient):
        response = await client.post("/wholesalers", json=wholesaler_payload(initial_balance="1500.00"))

        data = response.json()
        assert data["initial_balance"] == "1500.00"
        assert data["total_purchased"] == "1500.00"
        assert data["total_paid"] == "0.00"
        assert data["outstanding_due"] == "1500.00"

    async def test_negative_initial_balance_is_advance(self, client: AsyncClient):
        response = await client.post("/wholesalers", json=wholesaler_payload(initial_balance="-200.00"))

        data = response.json()
        assert data["total_purchased"] == "0.00"
        assert data["total_paid"] == "200.00"
        assert data["outstanding_due"] == "-200.00"

    async def test_phone_and_address_required(self, client: AsyncClient):
        response = await client.post("/wholesalers", json={"name": "Sharma Traders"})

        assert response.status_code == 422

    async def test_duplicate_phone_conflict(self, client: AsyncClient, db_session: AsyncSession):
        await WholesalerFactory.create(
            db_session, shopkeeper_id=client.shopkeeper_id, phone="9811122233"
        )

        response = await client.post("/wholesalers", json=wholesaler_payload(name="Gupta & Sons"))

        assert response.status_code == 409
        data = response.json()
        assert data["code"] == "CONFLICT"
        assert data["message"] == "Phone already exists for another wholesaler"
        assert data["details"]["field"] == "phone"

    async def test_duplicate_whatsapp_conflict(self, client: AsyncClient, db_session: AsyncSession):
        await WholesalerFactory.create(
            db_session, shopkeeper_id=client.shopkeeper_id, whatsapp_number="9000000001"
        )

        response = await client.post(
            "/wholesalers", json=wholesaler_payload(whatsapp_number="9000000001")
        )

        assert response.status_code == 409
        assert response.json()["details"]["field"] == "whatsapp_number"

    async def test_deleted_wholesaler_still_holds_phone(self, client: AsyncClient, db_session: AsyncSession):
        await WholesalerFactory.create(
            db_session,
            shopkeeper_id=client.shopkeeper_id,
            phone="9811122233",
            is_deleted=True,
            is_active=False,
        )

        response = await client.post("/wholesalers", json=wholesaler_payload())

        assert response.status_code == 409

    async def test_same_phone_allowed_for_another_shopkeeper(
        self, client: AsyncClient, other_client: AsyncClient
    ):
        first = await client.post("/wholesalers", json=wholesaler_payload())
        second = await other_client.post("/wholesalers", json=wholesaler_payload())

        assert first.status_code == 201
        assert second.status_code == 201


class TestUpdateWholesaler:
    """PATCH /wholesalers/{id}"""

    async def test_update_keeps_own_phone(self, client: AsyncClient, db_session: AsyncSession):
        wholesaler = await WholesalerFactory.create(
            db_session, shopkeeper_id=client.shopkeeper_id, phone="9811122233"
        )

        response = await client.patch(
            f"/wholesalers/{wholesaler.id}", json={"phone": "9811122233", "place": "Ajmer"}
        )

        assert response.status_code == 200
        assert response.json()["place"] == "Ajmer"

    async def test_update_to_taken_phone(self, client: AsyncClient, db_session: AsyncSession):
        await WholesalerFactory.create(
            db_session, shopkeeper_id=client.shopkeeper_id, phone="9811122233"
        )
        other = await WholesalerFactory.create(db_session, shopkeeper_id=client.shopkeeper_id)

        response = await client.patch(f"/wholesalers/{other.id}", json={"phone": "9811122233"})

        assert response.status_code == 409

    async def test_balances_cannot_be_patched(self, client: AsyncClient, db_session: AsyncSession):
        wholesaler = await WholesalerFactory.create(db_session, shopkeeper_id=client.shopkeeper_id)

        response = await client.patch(
            f"/wholesalers/{wholesaler.id}", json={"total_paid": "5000.00"}
        )

        assert response.status_code == 422


class TestSoftDelete:
    """DELETE /wholesalers/{id} and PATCH /wholesalers/{id}/restore"""

    async def test_delete_and_restore(self, client: AsyncClient, db_session: AsyncSession):
        wholesaler = await WholesalerFactory.create(
            db_session,
            shopkeeper_id=client.shopkeeper_id,
            total_purchased=Decimal("700.00"),
        )
        wid = wholesaler.id

        deleted = await client.delete(f"/wholesalers/{wid}")
        assert deleted.status_code == 200
        assert deleted.json()["is_deleted"] is True
        assert deleted.json()["is_active"] is False
        assert deleted.json()["deleted_at"] is not None
        assert deleted.json()["outstanding_due"] == "700.00"

        listed = (await client.get("/wholesalers")).json()
        assert listed["total"] == 0

        listed = (await client.get("/wholesalers", params={"include_deleted": "true"})).json()
        assert listed["total"] == 1

        assert (await client.get(f"/wholesalers/{wid}")).status_code == 200

        restored = await client.patch(f"/wholesalers/{wid}/restore")
        assert restored.status_code == 200
        assert restored.json()["is_deleted"] is False
        assert restored.json()["is_active"] is True
        assert restored.json()["deleted_at"] is None

    async def test_delete_twice_rejected(self, client: AsyncClient, db_session: AsyncSession):
        wholesaler = await WholesalerFactory.create(
            db_session, shopkeeper_id=client.shopkeeper_id, is_deleted=True
        )

        response = await client.delete(f"/wholesalers/{wholesaler.id}")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_STATE"

    async def test_restore_live_wholesaler_rejected(self, client: AsyncClient, db_session: AsyncSession):
        wholesaler = await WholesalerFactory.create(db_session, shopkeeper_id=client.shopkeeper_id)

        response = await client.patch(f"/wholesalers/{wholesaler.id}/restore")

        assert response.status_code == 400


class TestWholesalerListAndStats:
    """GET /wholesalers, /wholesalers/stats, /wholesalers/dashboard"""

    async def test_search_and_sort(self, client: AsyncClient, db_session: AsyncSession):
        await WholesalerFactory.create(
            db_session, shopkeeper_id=client.shopkeeper_id, name="Alpha Foods", address="Station Road"
        )
        await WholesalerFactory.create(
            db_session, shopkeeper_id=client.shopkeeper_id, name="Beta Oils", address="Old Town"
        )

        searched = (await client.get("/wholesalers", params={"search": "station"})).json()
        assert [w["name"] for w in searched["items"]] == ["Alpha Foods"]

        by_name = (await client.get("/wholesalers", params={"sort_by": "name"})).json()
        assert [w["name"] for w in by_name["items"]] == ["Alpha Foods", "Beta Oils"]

    async def test_equal_sort_keys_page_stably(self, client: AsyncClient, db_session: AsyncSession):
        ids = []
        for _ in range(3):
            wholesaler = await WholesalerFactory.create(
                db_session, shopkeeper_id=client.shopkeeper_id, name="Same Traders"
            )
            ids.append(str(wholesaler.id))

        seen = []
        for page in (1, 2, 3):
            data = (
                await client.get("/wholesalers", params={"sort_by": "name", "limit": 1, "page": page})
            ).json()
            seen.extend(w["id"] for w in data["items"])

        assert seen == sorted(ids)

    async def test_stats_count_deleted_apart(self, client: AsyncClient, db_session: AsyncSession):
        await WholesalerFactory.create(
            db_session, shopkeeper_id=client.shopkeeper_id, total_purchased=Decimal("300.00")
        )
        await WholesalerFactory.create(
            db_session, shopkeeper_id=client.shopkeeper_id, is_active=False
        )
        await WholesalerFactory.create(
            db_session,
            shopkeeper_id=client.shopkeeper_id,
            total_purchased=Decimal("50.00"),
            is_deleted=True,
            is_active=False,
        )

        data = (await client.get("/wholesalers/stats")).json()

        assert data["total"] == 2
        assert data["active"] == 1
        assert data["inactive"] == 1
        assert data["deleted"] == 1
        assert data["with_dues"] == 1
        assert Decimal(data["total_outstanding"]) == Decimal("300.00")

    async def test_dashboard_includes_deleted(self, client: AsyncClient, db_session: AsyncSession):
        await WholesalerFactory.create(
            db_session,
            shopkeeper_id=client.shopkeeper_id,
            total_purchased=Decimal("300.00"),
            total_paid=Decimal("100.00"),
        )
        await WholesalerFactory.create(
            db_session,
            shopkeeper_id=client.shopkeeper_id,
            total_purchased=Decimal("50.00"),
            is_deleted=True,
        )

        data = (await client.get("/wholesalers/dashboard")).json()

        assert data["total_wholesalers"] == 2
        assert Decimal(data["total_purchased"]) == Decimal("350.00")
        assert Decimal(data["total_paid"]) == Decimal("100.00")
        assert Decimal(data["total_outstanding"]) == Decimal("250.00")
