"""
Shared fixtures: an in-memory database, a fake S3 client behind the real
StorageService, and an UploadClient that talks to the app's own gateway.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import httpx
import pytest
from botocore.exceptions import ClientError
from httpx import ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base, create_session_maker
from app.main import create_app
from app.services.storage import StorageService
from app.services.upload_client import UploadClient

BUCKET = "test-bucket"
FAILING_BODY = b"fail"


class FakeS3Client:
    """Records put_object calls; rejects any object whose body is FAILING_BODY."""

    def __init__(self):
        self.objects = {}

    def put_object(self, Bucket, Key, Body, ContentType=None):
        if Body == FAILING_BODY:
            raise ClientError(
                {"Error": {"Code": "InternalError", "Message": "injected failure"}},
                "PutObject",
            )
        self.objects[Key] = {"body": Body, "content_type": ContentType}
        return {"ETag": '"etag"'}


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def s3_client():
    return FakeS3Client()


@pytest.fixture
def storage_service(s3_client):
    return StorageService(bucket_name=BUCKET, region="us-east-1", s3_client=s3_client)


@pytest.fixture
async def app(engine, storage_service):
    app = create_app()
    app.state.engine = engine
    app.state.session_maker = create_session_maker(engine)
    app.state.storage_service = storage_service

    gateway_client = httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    app.state.upload_client = UploadClient(gateway_client, "/api/v1/upload-s3")
    yield app
    await gateway_client.aclose()


@pytest.fixture
async def client(app):
    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def make_category(client):
    async def _make(name="Shoes", **data):
        response = await client.post("/api/v1/categories", data={"name": name, **data})
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_product(client):
    async def _make(name="Sneaker", price="49.9", stock="5", **data):
        response = await client.post(
            "/api/v1/products",
            data={"name": name, "price": price, "stock": stock, **data},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make
