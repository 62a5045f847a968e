import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import main
from recipe_catalog.database import get_db, set_sqlite_pragmas
from recipe_catalog.models import Base
from recipe_catalog.services.upload_service import ObjectStorage, get_storage


class FakeS3Client:
    """Records what would have been sent to the bucket."""

    def __init__(self, fail_puts: bool = False):
        self.buckets = set()
        self.objects = {}
        self.fail_puts = fail_puts

    def head_bucket(self, Bucket):
        if Bucket not in self.buckets:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")

    def create_bucket(self, Bucket):
        self.buckets.add(Bucket)

    def put_object(self, Bucket, Key, Body, ContentType, Metadata):
        if self.fail_puts:
            raise ClientError({"Error": {"Code": "503", "Message": "Slow Down"}}, "PutObject")
        self.objects[(Bucket, Key)] = {"body": Body, "content_type": ContentType, "metadata": Metadata}


@pytest.fixture
def engine():
    # StaticPool so the same in-memory database is shared across connections
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    event.listen(eng, "connect", set_sqlite_pragmas)
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def s3():
    return FakeS3Client()


@pytest.fixture
def storage(s3):
    return ObjectStorage(client=s3, bucket="test-uploads", public_url="http://minio.test:9000")


@pytest.fixture
def client(session_factory, storage):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    main.app.dependency_overrides[get_db] = override_get_db
    main.app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()
