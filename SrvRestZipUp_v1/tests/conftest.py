from __future__ import annotations

import pytest

import globalVar as Var

BOUNDARY = "zipupTestBoundary7MA4YWxk"


def _multipart_body(parts) -> bytes:
    """parts: lista de (name, filename|None, content_type|None, data)."""
    out = b""
    for name, filename, ctype, data in parts:
        disp = f'form-data; name="{name}"'
        if filename is not None:
            disp += f'; filename="{filename}"'
        out += f"--{BOUNDARY}\r\nContent-Disposition: {disp}\r\n".encode()
        if ctype:
            out += f"Content-Type: {ctype}\r\n".encode()
        out += b"\r\n" + data + b"\r\n"
    return out + f"--{BOUNDARY}--\r\n".encode()


@pytest.fixture
def multipart():
    """Devuelve (content_type_header, body) para las partes dadas."""
    def build(*parts):
        return f"multipart/form-data; boundary={BOUNDARY}", _multipart_body(parts)
    return build


@pytest.fixture
def upload_dir(tmp_path):
    d = tmp_path / "uploads"
    d.mkdir()
    return d


@pytest.fixture
def settings(upload_dir):
    return Var.load_settings(upload_dir, debug=False, log_level="INFO")
