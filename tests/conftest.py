from s3_documents import RecordingSigner
from s3_documents import ScriptedTransport
from s3_multipart.s3client import MultipartClient

import pytest


@pytest.fixture
def transport():
    return ScriptedTransport()


@pytest.fixture
def signer():
    return RecordingSigner()


@pytest.fixture
def client(transport, signer):
    return MultipartClient(
        endpoint_url="https://s3.example.com",
        aws_access_key_id="AKIDEXAMPLE",
        aws_secret_access_key="secret",
        transport=transport,
        signer=signer,
    )
