import asyncio

from app.models.enums import OTPPurpose
from app.services import email_service


def test_name_from_email():
    assert email_service.name_from_email("jane.doe@x.com") == "Jane Doe"
    assert email_service.name_from_email("bob_smith-jr@x.com") == "Bob Smith Jr"


def test_otp_email_wording_depends_on_purpose():
    subject, html = email_service.render_otp_email("123456", OTPPurpose.SIGNUP, "Jane")
    assert subject == "Verify your account - OTP Code"
    assert "123456" in html
    assert "Hello Jane," in html
    assert "5 minutes" in html

    subject, _ = email_service.render_otp_email("123456", OTPPurpose.SIGNIN)
    assert subject == "Sign in to your account - OTP Code"


def test_kyc_email_wording():
    subject, html = email_service.render_kyc_email("approved", "All good")
    assert subject == "KYC Verification Approved"
    assert "All good" in html

    subject, html = email_service.render_kyc_email("rejected")
    assert subject == "KYC Verification Rejected"
    assert "submit a new KYC application" in html


def test_send_failures_are_swallowed(monkeypatch):
    async def broken_send(message):
        raise ConnectionError("SMTP down")

    monkeypatch.setattr(email_service.fast_mail, "send_message", broken_send)
    asyncio.run(email_service.send_otp_email("a@x.com", "123456", OTPPurpose.SIGNIN))


def test_reviewer_notes_and_names_are_html_escaped():
    _, html = email_service.render_kyc_email("rejected", '<a href="http://evil">click</a> & retry')
    assert "<a href" not in html
    assert "&lt;a href=&quot;http://evil&quot;&gt;click&lt;/a&gt; &amp; retry" in html

    _, html = email_service.render_otp_email("123456", OTPPurpose.SIGNIN, "O'Brien & <Co>")
    assert "Hello O&#x27;Brien &amp; &lt;Co&gt;," in html
