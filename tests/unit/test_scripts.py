import io
import json
import os
import runpy

from sepay import Signer, build_message

SCRIPT = os.path.abspath(os.path.join(os.path.dirname(__file__), "../../scripts/sign.py"))


def test_sign_script_prints_message_and_signature(monkeypatch, capsys):
    fields = {"merchant": "M1", "order_amount": 1000, "currency": "VND", "cancel_url": None}
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({**fields, "secret_key": "secret"})))
    runpy.run_path(SCRIPT, run_name="__main__")
    out = json.loads(capsys.readouterr().out)
    expected = {"merchant": "M1", "order_amount": "1000", "currency": "VND", "cancel_url": ""}
    assert out["message"] == build_message(expected)
    assert out["signature"] == Signer("secret").sign(expected)
    assert "secret_key" not in out["message"]
