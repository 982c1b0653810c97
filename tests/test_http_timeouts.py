"""
Test that all httpx.AsyncClient instances use explicit timeouts.

This ensures a slow email provider can't hold an intake request open indefinitely.
"""

from pathlib import Path

import httpx

from app.services.integrations.http_client import create_httpx_client, get_httpx_timeout


def test_http_client_helper_returns_timeout():
    """Test that get_httpx_timeout() returns a proper timeout object."""
    timeout = get_httpx_timeout()
    assert isinstance(timeout, httpx.Timeout)
    assert timeout.connect == 5.0
    assert timeout.read == 10.0
    assert timeout.write == 5.0
    assert timeout.pool == 5.0


def test_create_httpx_client_uses_timeout():
    """Test that create_httpx_client() creates a client with timeout."""
    client = create_httpx_client(base_url="https://api.resend.test", headers={"X-Test": "1"})
    assert isinstance(client, httpx.AsyncClient)
    assert client.timeout == get_httpx_timeout()
    assert client.headers["X-Test"] == "1"
    assert client.base_url.host == "api.resend.test"


def test_email_client_uses_timeout_helper():
    """The Resend client must go through create_httpx_client()."""
    email_client_file = (
        Path(__file__).parent.parent / "app" / "services" / "notifications" / "email_client.py"
    )
    content = email_client_file.read_text(encoding="utf-8")

    assert "create_httpx_client" in content, (
        "email_client.py should use create_httpx_client() from http_client"
    )


def test_no_direct_httpx_client_creation_in_app():
    """Test that app/ code doesn't create httpx.AsyncClient() without timeout."""
    app_dir = Path(__file__).parent.parent / "app"
    assert app_dir.exists(), "app/ directory not found"

    issues = []

    for py_file in app_dir.rglob("*.py"):
        if "__pycache__" in str(py_file):
            continue

        lines = py_file.read_text(encoding="utf-8").split("\n")
        for i, line in enumerate(lines, start=1):
            if "httpx.AsyncClient(" not in line or line.strip().startswith("#"):
                continue
            # timeout may be passed on one of the following lines
            context_lines = "\n".join(lines[max(0, i - 2) : min(len(lines), i + 6)])
            if "timeout" not in context_lines.lower():
                rel_path = py_file.relative_to(app_dir.parent)
                issues.append(f"{rel_path}:{i}: {line.strip()}")

    if issues:
        error_msg = (
            "Found httpx.AsyncClient() calls without explicit timeout. "
            "Use create_httpx_client() from app.services.integrations.http_client instead:\n\n"
            + "\n".join(f"  - {issue}" for issue in issues)
        )
        raise AssertionError(error_msg)
