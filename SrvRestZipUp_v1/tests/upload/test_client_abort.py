import pytest

from ls_zipup_Srv01 import create_app

pytestmark = pytest.mark.anyio


def _scope(content_type: str, method: str = "POST", path: str = "/api/upload") -> dict:
    return {
        "type": "http",
        "asgi": {"version": "3.0", "spec_version": "2.3"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": b"",
        "headers": [(b"content-type", content_type.encode()), (b"user-agent", b"pytest")],
        "client": ("10.0.0.9", 51000),
        "server": ("testserver", 80),
        "state": {},
    }


def _scripted_receive(messages):
    pending = list(messages)

    async def receive():
        if pending:
            return pending.pop(0)
        return {"type": "http.disconnect"}

    return receive


async def _drive(app, content_type, messages, **scope_kw):
    sent = []

    async def send(message):
        sent.append(message)

    await app(_scope(content_type, **scope_kw), _scripted_receive(messages), send)
    return sent


async def test_disconnect_mid_file_sends_nothing(settings, upload_dir, multipart):
    app = create_app(settings)
    ctype, body = multipart(("file", "cortado.zip", "application/zip", b"Z" * 50_000))
    messages = [
        {"type": "http.request", "body": body[:10_000], "more_body": True},
        {"type": "http.request", "body": body[10_000:20_000], "more_body": True},
        {"type": "http.disconnect"},
    ]

    sent = await _drive(app, ctype, messages)

    assert sent == []
    assert list(upload_dir.iterdir()) == []


async def test_disconnect_before_file_part_sends_nothing(settings, upload_dir, multipart):
    app = create_app(settings)
    ctype, body = multipart(("file", "cortado.zip", "application/zip", b"Z" * 100))

    sent = await _drive(app, ctype, [{"type": "http.request", "body": body[:10], "more_body": True}])

    assert sent == []
    assert list(upload_dir.iterdir()) == []


async def test_service_keeps_working_after_abort(settings, upload_dir, multipart):
    app = create_app(settings)
    ctype, body = multipart(("file", "cortado.zip", "application/zip", b"Z" * 50_000))
    await _drive(app, ctype, [{"type": "http.request", "body": body[:30_000], "more_body": True}])

    ok_ctype, ok_body = multipart(("file", "entero.zip", "application/zip", b"PK" * 1000))
    sent = await _drive(app, ok_ctype, [{"type": "http.request", "body": ok_body, "more_body": False}])

    assert sent[0]["type"] == "http.response.start"
    assert sent[0]["status"] == 200
    stored = list(upload_dir.iterdir())
    assert len(stored) == 1 and stored[0].name.startswith("entero_")
    assert stored[0].read_bytes() == b"PK" * 1000

    info = await _drive(app, "application/json", [], method="GET", path="/")
    assert info[0]["status"] == 200
