"""
Shared fixtures for check-certificates tests.
"""

import socket
import ssl
import threading
from datetime import datetime, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_certificate(
    common_name: str = "localhost",
    not_before: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc),
    not_after: datetime = datetime(2034, 1, 1, tzinfo=timezone.utc),
):
    """Create a self-signed certificate and its private key."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .add_extension(x509.SubjectAlternativeName([x509.DNSName(common_name)]), critical=False)
        .sign(key, hashes.SHA256())
    )
    return cert, key


@pytest.fixture
def now():
    """Fixed check time."""
    return NOW


@pytest.fixture
def certificate():
    """A long-lived self-signed certificate."""
    cert, _ = make_certificate()
    return cert


@pytest.fixture
def tls_server(tmp_path):
    """Serve a self-signed certificate on a local port for one handshake.

    Yields (port, certificate).
    """
    cert, key = make_certificate()
    cert_file = tmp_path / "cert.pem"
    key_file = tmp_path / "key.pem"
    cert_file.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    key_file.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(cert_file, key_file)

    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    listener.settimeout(10)
    port = listener.getsockname()[1]

    def serve():
        try:
            conn, _ = listener.accept()
        except OSError:
            return
        try:
            with context.wrap_socket(conn, server_side=True) as tls_conn:
                tls_conn.settimeout(5)
                tls_conn.recv(1)
        except OSError:
            pass

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    yield port, cert
    listener.close()
    thread.join(timeout=5)


@pytest.fixture
def closed_port():
    """A local port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def cert_factory():
    """Factory for self-signed certificates."""
    return make_certificate
