import sys

sys.path.append(__file__.rsplit("/", 2)[0])

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


def _pem_pair(key_size=2048):

    key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM, serialization.PrivateFormat.PKCS8, serialization.NoEncryption())
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo)
    return private_pem, public_pem


@pytest.fixture(scope="session")
def rsa_pair():
    ''' (private PEM, public PEM) '''
    return _pem_pair()


@pytest.fixture(scope="session")
def other_rsa_pair():
    return _pem_pair()


@pytest.fixture(scope="session")
def weak_rsa_pair():
    return _pem_pair(1024)


@pytest.fixture
def message():
    return b"Hello World!"
