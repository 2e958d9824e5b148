"""
Liveness and readiness.
"""
from app.services.storage import StorageService


async def test_liveness(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_ready_reports_each_check(client):
    response = await client.get("/api/v1/health/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "ready"
    assert response.json()["checks"] == {"database": "ok", "storage": "ok"}


async def test_not_ready_without_bucket(app, client, s3_client):
    app.state.storage_service = StorageService(
        bucket_name=None, region="us-east-1", s3_client=s3_client
    )

    response = await client.get("/api/v1/health/ready")

    assert response.status_code == 503
    assert response.json()["detail"] == "Not ready: storage"
