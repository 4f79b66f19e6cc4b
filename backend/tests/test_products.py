"""
Product catalog tests.

Verifies:
- Listing: substring search, pagination clamps, hasMore, positions filter
- with/without position filters partition the catalog
- Create validation and batch delete semantics
"""

import pytest


def _ids(page: dict) -> list:
    return [p["id"] for p in page["items"]]


class TestListProducts:

    def test_search_is_case_insensitive_substring(self, client, make_product):
        make_product("Red Chair")
        make_product("Blue chair")
        make_product("Table")

        resp = client.get("/api/products", params={"q": "CHAIR"})
        assert resp.status_code == 200
        names = [p["name"] for p in resp.json()["items"]]
        assert names == ["Red Chair", "Blue chair"]
        assert resp.json()["total"] == 2

    def test_pagination_and_has_more(self, client, make_product):
        created = [make_product(f"Item {i}")["id"] for i in range(5)]

        first = client.get("/api/products", params={"page": 1, "limit": 2}).json()
        assert _ids(first) == created[:2]
        assert first["total"] == 5
        assert first["hasMore"] is True

        last = client.get("/api/products", params={"page": 3, "limit": 2}).json()
        assert _ids(last) == created[4:]
        assert last["hasMore"] is False

    def test_limit_and_page_are_clamped(self, client, make_product):
        make_product("Only")

        data = client.get("/api/products", params={"limit": 1000, "page": 0}).json()
        assert data["limit"] == 200
        assert data["page"] == 1

        data = client.get("/api/products", params={"limit": 0}).json()
        assert data["limit"] == 1

    def test_default_limit(self, client):
        assert client.get("/api/products").json()["limit"] == 30

    def test_unknown_positions_filter_is_rejected(self, client):
        resp = client.get("/api/products", params={"positions": "some"})
        assert resp.status_code == 400

    def test_positions_filters_partition_the_catalog(self, client, make_product, make_warehouse, save_positions):
        a = make_product("Alpha")
        b = make_product("Beta")
        c = make_product("Alphabet")
        w1 = make_warehouse("North")
        w2 = make_warehouse("South")

        # Alpha placed in two warehouses must still appear once
        save_positions(w1["id"], a["id"], [{"x": 1, "y": 1}])
        save_positions(w2["id"], a["id"], [{"x": 2, "y": 2}])
        save_positions(w1["id"], c["id"], [{"x": 3, "y": 3}])

        for q in (None, "alpha", "zzz"):
            params = {"q": q} if q else {}
            all_ids = _ids(client.get("/api/products", params=params).json())
            with_page = client.get("/api/products", params={**params, "positions": "with"}).json()
            without_page = client.get("/api/products", params={**params, "positions": "without"}).json()

            with_ids, without_ids = _ids(with_page), _ids(without_page)
            assert not set(with_ids) & set(without_ids)
            assert sorted(with_ids + without_ids) == all_ids
            assert with_page["total"] == len(with_ids)

        assert _ids(client.get("/api/products", params={"positions": "with"}).json()) == [a["id"], c["id"]]
        assert _ids(client.get("/api/products", params={"positions": "without"}).json()) == [b["id"]]

    def test_positions_summary(self, client, make_product, make_warehouse, save_positions):
        a = make_product("A")
        make_product("B")
        w = make_warehouse("W")
        save_positions(w["id"], a["id"], [{"x": 10, "y": 10}])

        resp = client.get("/api/debug/positions-summary")
        assert resp.json() == {"total": 2, "withPositions": 1, "withoutPositions": 1}


class TestSingleProduct:

    def test_get_by_id(self, client, make_product):
        p = make_product("Drill")
        resp = client.get(f"/api/products/{p['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"id": p["id"], "name": "Drill"}

    def test_missing_product_is_404(self, client):
        assert client.get("/api/products/9999").status_code == 404

    def test_non_numeric_id_is_400(self, client):
        assert client.get("/api/products/abc").status_code == 400


class TestCreateProduct:

    def test_name_is_trimmed(self, client, admin_headers):
        resp = client.post("/api/products", json={"name": "  Hammer  "}, headers=admin_headers)
        assert resp.status_code == 201
        assert resp.json()["name"] == "Hammer"

    @pytest.mark.parametrize("body", [{"name": ""}, {"name": "   "}, {}, {"name": 42}])
    def test_blank_or_missing_name_is_rejected(self, client, admin_headers, body):
        resp = client.post("/api/products", json=body, headers=admin_headers)
        assert resp.status_code == 400


class TestBatchDelete:

    def _delete(self, client, headers, ids):
        return client.request("DELETE", "/api/products/batch", json={"productIds": ids}, headers=headers)

    def test_deletes_products_and_their_positions(self, client, admin_headers, make_product, make_warehouse, save_positions):
        a = make_product("A")
        b = make_product("B")
        keep = make_product("C")
        w = make_warehouse("W")
        save_positions(w["id"], a["id"], [{"x": 5, "y": 5}])

        resp = self._delete(client, admin_headers, [a["id"], b["id"], 9999])
        assert resp.status_code == 200
        deleted = resp.json()["deletedProducts"]
        assert [p["id"] for p in deleted] == [a["id"], b["id"]]

        remaining = _ids(client.get("/api/products").json())
        assert remaining == [keep["id"]]
        assert client.get(f"/api/products/{a['id']}/warehouses").json()["warehouses"] == []
        assert client.get("/api/debug/positions-summary").json()["withPositions"] == 0

    @pytest.mark.parametrize("ids", [[], [0], [-1], [1, "2"], [1.5], [True]])
    def test_invalid_id_lists_are_rejected(self, client, admin_headers, make_product, ids):
        make_product("Survivor")
        resp = self._delete(client, admin_headers, ids)
        assert resp.status_code == 400
        assert client.get("/api/products").json()["total"] == 1

    def test_missing_body_is_rejected(self, client, admin_headers):
        resp = client.request("DELETE", "/api/products/batch", json={}, headers=admin_headers)
        assert resp.status_code == 400

    def test_worker_cannot_batch_delete(self, client, worker_headers, make_product):
        p = make_product("A")
        assert self._delete(client, worker_headers, [p["id"]]).status_code == 403


class TestProductWarehouses:

    def test_lists_only_warehouses_holding_positions(self, client, make_product, make_warehouse, save_positions):
        p = make_product("Bolt")
        w1 = make_warehouse("One")
        make_warehouse("Two")
        w3 = make_warehouse("Three")
        save_positions(w3["id"], p["id"], [{"x": 1, "y": 2}])
        save_positions(w1["id"], p["id"], [{"x": 3, "y": 4}, {"x": 5, "y": 6}])

        data = client.get(f"/api/products/{p['id']}/warehouses").json()
        assert data["productId"] == p["id"]
        assert [w["id"] for w in data["warehouses"]] == [w1["id"], w3["id"]]
        assert data["warehouses"][0]["positions"] == [{"x": 3, "y": 4}, {"x": 5, "y": 6}]
