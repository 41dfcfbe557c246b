"""Tests for the tinyshot command line."""

import json

from tinyshot_core.cli.snapshot import main


LOGIN_HTML = (
    "<html><head><title>Login</title></head><body><form>"
    '<input type="text" placeholder="Username"><button>Sign In</button>'
    "</form></body></html>"
)


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_compress_file(tmp_path, capsys):
    page = tmp_path / "page.html"
    page.write_text(LOGIN_HTML, encoding="utf-8")

    assert main(["compress", str(page), "--max-elems", "1"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["title"] == "Login"
    assert data["elems"] == [
        {"type": "btn", "text": "Sign In", "sel": "form button", "context": "form"}
    ]


def test_compress_with_xpath(tmp_path, capsys):
    page = tmp_path / "page.html"
    page.write_text(LOGIN_HTML, encoding="utf-8")

    assert main(["compress", str(page), "--xpath", "--compact"]) == 0

    out = capsys.readouterr().out
    assert out.count("\n") == 1
    assert json.loads(out)["elems"][0]["xpath"] == "/html/body/form/button"


def test_restore_file(tmp_path, capsys):
    snapshot = tmp_path / "snapshot.json"
    snapshot.write_text(json.dumps({
        "title": "Login",
        "text": "Welcome back",
        "elems": [{"type": "btn", "text": "Sign In", "sel": "form button", "context": "form"}],
    }), encoding="utf-8")

    assert main(["restore", str(snapshot)]) == 0

    out = capsys.readouterr().out
    assert "<title>Login</title>" in out
    assert '<button sel="form button">Sign In</button>' in out
    assert "<p>Welcome back</p>" in out


def test_missing_file(tmp_path, capsys):
    assert main(["compress", str(tmp_path / "missing.html")]) == 1
    assert "Input file not found" in capsys.readouterr().err


def test_invalid_limit(tmp_path, capsys):
    page = tmp_path / "page.html"
    page.write_text(LOGIN_HTML, encoding="utf-8")

    assert main(["compress", str(page), "--max-text", "0"]) == 1
    assert "Invalid snapshot limits" in capsys.readouterr().err
