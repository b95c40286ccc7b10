class TestCatalogAPI:

    def test_list_all(self, test_client):
        response = test_client.get("/api/v1/products")

        data = response.get_json()["data"]
        assert response.status_code == 200
        assert data["count"] == 10
        assert data["items"][0]["price"] == "299.99"

    def test_filter_by_category(self, test_client):
        data = test_client.get("/api/v1/products?category=home").get_json()["data"]

        assert {p["id"] for p in data["items"]} == {"8", "9", "10"}

    def test_search_within_category(self, test_client):
        data = test_client.get("/api/v1/products?q=wireless&category=electronics").get_json()["data"]

        assert [p["name"] for p in data["items"]] == ["Premium Wireless Headphones", "Wireless Mouse"]

    def test_short_search_rejected(self, test_client):
        assert test_client.get("/api/v1/products?q=a").status_code == 400

    def test_get_product(self, test_client):
        data = test_client.get("/api/v1/products/2").get_json()["data"]

        assert data["name"] == "Smart Fitness Watch"
        assert data["stock"] == 5
        assert data["in_stock"] is True

    def test_unknown_product_is_404(self, test_client):
        response = test_client.get("/api/v1/products/999")

        assert response.status_code == 404
        assert response.get_json()["error"]["message"] == "Product not found with ID: 999"
