class TestServiceInfo:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Process-Time" in response.headers

    def test_api_info(self, client):
        data = client.get("/api/v1/info").json()
        assert data["name"] == "Hospital Management System"
        assert data["endpoints"]["appointments"] == "/api/v1/appointments"

    def test_unknown_route(self, client):
        response = client.get("/api/v1/nowhere")
        assert response.status_code == 404
        assert response.json() == {
            "error": "Not Found",
            "detail": "Not Found",
            "path": "/api/v1/nowhere",
        }
