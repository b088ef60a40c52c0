"""Tests for customer endpoints."""

from decimal import Decimal

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.models import Customer
from tests.factories import CustomerFactory


class TestCreateCustomer:
    """POST /customers"""

    async def test_create_due_customer(self, client: AsyncClient):
        response = await client.post(
            "/customers",
            json={"name": "Ravi Kumar", "phone": "98765 43210", "address": "Lane 4"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Ravi Kumar"
        assert data["type"] == "due"
        assert Decimal(data["outstanding_due"]) == Decimal("0")
        assert data["is_active"] is True

    async def test_positive_opening_balance_is_owed(self, client: AsyncClient):
        response = await client.post(
            "/customers", json={"name": "Ravi Kumar", "opening_balance": "250.00"}
        )

        data = response.json()
        assert data["total_sales"] == "250.00"
        assert data["total_paid"] == "0.00"
        assert data["outstanding_due"] == "250.00"
        assert data["opening_balance"] == "250.00"

    async def test_negative_opening_balance_is_advance(self, client: AsyncClient):
        response = await client.post(
            "/customers", json={"name": "Ravi Kumar", "opening_balance": "-80.00"}
        )

        data = response.json()
        assert data["total_sales"] == "0.00"
        assert data["total_paid"] == "80.00"
        assert data["outstanding_due"] == "-80.00"

    async def test_walk_in_customer_cannot_have_opening_balance(self, client: AsyncClient):
        response = await client.post(
            "/customers",
            json={"name": "Walk In", "type": "normal", "opening_balance": "10.00"},
        )

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_balance_fields_not_accepted_on_update(self, client: AsyncClient, db_session: AsyncSession):
        customer = await CustomerFactory.create(db_session, shopkeeper_id=client.shopkeeper_id)

        response = await client.patch(
            f"/customers/{customer.id}", json={"outstanding_due": "0.00"}
        )

        assert response.status_code == 422

    async def test_invalid_phone_rejected(self, client: AsyncClient):
        response = await client.post("/customers", json={"name": "Ravi Kumar", "phone": "call me"})

        assert response.status_code == 422


class TestListCustomers:
    """GET /customers"""

    async def test_filters_and_search(self, client: AsyncClient, db_session: AsyncSession):
        await CustomerFactory.create(
            db_session,
            shopkeeper_id=client.shopkeeper_id,
            name="Ravi Kumar",
            total_sales=Decimal("500.00"),
        )
        await CustomerFactory.create(
            db_session,
            shopkeeper_id=client.shopkeeper_id,
            name="Meena Devi",
            phone="9000011111",
        )
        await CustomerFactory.create(
            db_session,
            shopkeeper_id=client.shopkeeper_id,
            name="Counter Sales",
            type="normal",
            is_active=False,
        )

        due = (await client.get("/customers", params={"type": "due"})).json()
        assert due["total"] == 2

        with_dues = (await client.get("/customers", params={"dues": "with_dues"})).json()
        assert [c["name"] for c in with_dues["items"]] == ["Ravi Kumar"]

        inactive = (await client.get("/customers", params={"status": "inactive"})).json()
        assert [c["name"] for c in inactive["items"]] == ["Counter Sales"]

        by_phone = (await client.get("/customers", params={"search": "90000"})).json()
        assert [c["name"] for c in by_phone["items"]] == ["Meena Devi"]

    async def test_sort_by_outstanding(self, client: AsyncClient, db_session: AsyncSession):
        for name, sales in (("Small", "10.00"), ("Large", "900.00"), ("Medium", "300.00")):
            await CustomerFactory.create(
                db_session,
                shopkeeper_id=client.shopkeeper_id,
                name=name,
                total_sales=Decimal(sales),
            )

        data = (await client.get("/customers", params={"sort_by": "outstanding_due"})).json()

        assert [c["name"] for c in data["items"]] == ["Large", "Medium", "Small"]

    async def test_equal_sort_keys_page_stably(self, client: AsyncClient, db_session: AsyncSession):
        ids = []
        for _ in range(3):
            customer = await CustomerFactory.create(
                db_session, shopkeeper_id=client.shopkeeper_id, name="Same Name"
            )
            ids.append(str(customer.id))

        seen = []
        for page in (1, 2, 3):
            data = (
                await client.get("/customers", params={"sort_by": "name", "limit": 1, "page": page})
            ).json()
            seen.extend(c["id"] for c in data["items"])

        assert seen == sorted(ids)

    async def test_other_shopkeepers_customers_hidden(
        self, client: AsyncClient, other_client: AsyncClient, db_session: AsyncSession
    ):
        customer = await CustomerFactory.create(db_session, shopkeeper_id=client.shopkeeper_id)

        assert (await other_client.get("/customers")).json()["total"] == 0
        assert (await other_client.get(f"/customers/{customer.id}")).status_code == 404


class TestCustomerStats:
    """GET /customers/stats and /customers/dashboard"""

    async def test_stats(self, client: AsyncClient, db_session: AsyncSession):
        await CustomerFactory.create(
            db_session,
            shopkeeper_id=client.shopkeeper_id,
            total_sales=Decimal("400.00"),
            total_paid=Decimal("100.00"),
        )
        await CustomerFactory.create(
            db_session, shopkeeper_id=client.shopkeeper_id, is_active=False
        )

        data = (await client.get("/customers/stats")).json()

        assert data["total"] == 2
        assert data["active"] == 1
        assert data["inactive"] == 1
        assert data["with_dues"] == 1
        assert Decimal(data["total_outstanding"]) == Decimal("300.00")
        assert Decimal(data["total_sales"]) == Decimal("400.00")
        assert Decimal(data["total_paid"]) == Decimal("100.00")

    async def test_dashboard_defaults_to_due_customers(self, client: AsyncClient, db_session: AsyncSession):
        await CustomerFactory.create(
            db_session, shopkeeper_id=client.shopkeeper_id, total_sales=Decimal("150.00")
        )
        await CustomerFactory.create(
            db_session,
            shopkeeper_id=client.shopkeeper_id,
            type="normal",
            total_sales=Decimal("999.00"),
            total_paid=Decimal("999.00"),
        )

        data = (await client.get("/customers/dashboard")).json()

        assert data["total_customers"] == 1
        assert Decimal(data["total_sales"]) == Decimal("150.00")
        assert Decimal(data["total_outstanding"]) == Decimal("150.00")


class TestUpdateAndDeleteCustomer:
    """PATCH and DELETE /customers/{id}"""

    async def test_update_profile(self, client: AsyncClient, db_session: AsyncSession):
        customer = await CustomerFactory.create(db_session, shopkeeper_id=client.shopkeeper_id)

        response = await client.patch(
            f"/customers/{customer.id}",
            json={"name": "Ravi K", "address": "<b>New</b> address", "is_active": False},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Ravi K"
        assert data["address"] == "New address"
        assert data["is_active"] is False

    async def test_null_name_is_ignored(self, client: AsyncClient, db_session: AsyncSession):
        customer = await CustomerFactory.create(db_session, shopkeeper_id=client.shopkeeper_id)

        response = await client.patch(f"/customers/{customer.id}", json={"name": None})

        assert response.json()["name"] == "Ravi Kumar"

    async def test_hard_delete(self, client: AsyncClient, db_session: AsyncSession):
        customer = await CustomerFactory.create(db_session, shopkeeper_id=client.shopkeeper_id)
        customer_id = customer.id

        response = await client.delete(f"/customers/{customer_id}")

        assert response.status_code == 204
        assert await db_session.scalar(select(func.count(Customer.id))) == 0
        assert (await client.get(f"/customers/{customer_id}")).status_code == 404

    async def test_delete_missing_customer(self, client: AsyncClient):
        response = await client.delete("/customers/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404

    async def test_delete_refused_while_bills_are_active(self, client: AsyncClient, db_session: AsyncSession):
        customer = await CustomerFactory.create(db_session, shopkeeper_id=client.shopkeeper_id)
        customer_id = customer.id

        bill = await client.post(
            "/bills",
            json={
                "bill_type": "sale",
                "entity_type": "due_customer",
                "entity_id": str(customer_id),
                "entity_name": "Ravi Kumar",
                "total_amount": "500.00",
                "paid_amount": "100.00",
                "payment_method": "cash",
            },
        )
        assert bill.status_code == 201

        refused = await client.delete(f"/customers/{customer_id}")
        assert refused.status_code == 400
        assert refused.json()["code"] == "INVALID_STATE"
        assert refused.json()["details"]["active_bills"] == 1
        assert (await client.get(f"/customers/{customer_id}")).status_code == 200

        deleted_bill = await client.delete(f"/bills/{bill.json()['id']}")
        assert deleted_bill.status_code == 204

        refreshed = await db_session.get(Customer, customer_id, populate_existing=True)
        assert refreshed.outstanding_due == Decimal("0.00")

        response = await client.delete(f"/customers/{customer_id}")
        assert response.status_code == 204
        assert await db_session.scalar(select(func.count(Customer.id))) == 0
