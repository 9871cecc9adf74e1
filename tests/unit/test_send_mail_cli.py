import json

from scripts import send_mail


def test_dry_run_prints_payload(tmp_path, capsys):
    attachment = tmp_path / "notes.txt"
    attachment.write_text("hi")
    code = send_mail.main(
        ["--to", "a@x.com", "--to", "b@x.com", "--cc", "c@x.com", "--subject", "Hi",
         "--body", "Hello", "--attach", str(attachment), "--dry-run"]
    )
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    message = payload["message"]
    assert [r["emailAddress"]["address"] for r in message["toRecipients"]] == ["a@x.com", "b@x.com"]
    assert message["attachments"][0]["contentType"] == "text/plain"
    assert message["hasAttachments"] is True


def test_body_file(tmp_path):
    body = tmp_path / "body.txt"
    body.write_text("from file", encoding="utf-8")
    args = send_mail.build_parser().parse_args(["--to", "a@x.com", "--body-file", str(body)])
    assert send_mail.build_message(args).body == "from file"


def test_failed_send_returns_nonzero(monkeypatch):
    from graph_mailer.models import SendResult, SendStatus

    class StubMailer:
        def send(self, message):
            return SendResult(is_success=False, status=SendStatus.FAILED, error_message="boom")

    monkeypatch.setenv("GRAPH_CLIENT_ID", "client-id")
    monkeypatch.setenv("GRAPH_TENANT_ID", "tenant-id")
    monkeypatch.setattr(send_mail.GraphMailer, "from_settings", classmethod(lambda cls, s: StubMailer()))
    assert send_mail.main(["--to", "a@x.com"]) == 1
