import httpx
import pytest

from amritacare.application.ports.deliverer import OutgoingEmail
from amritacare.application.services.delivery_chain import AttemptState, DeliveryChain, otp_email
from amritacare.exceptions import DeliveryError
from amritacare.infrastructure.delivery.sendgrid_deliverer import SendGridDeliverer
from amritacare.infrastructure.delivery.smtp_deliverer import SmtpDeliverer


class FakeDeliverer:
    def __init__(self, name, configured=True, fail=False, on_send=None):
        self.name = name
        self.configured = configured
        self.fail = fail
        self.on_send = on_send
        self.calls = []

    def is_configured(self) -> bool:
        return self.configured

    def send(self, message, timeout: float) -> None:
        self.calls.append((message, timeout))
        if self.on_send:
            self.on_send()
        if self.fail:
            raise DeliveryError(f"{self.name} failed")


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


MESSAGE = OutgoingEmail(to="a@bl.students.amrita.edu", subject="s", body="b")


def test_first_success_short_circuits():
    a, b = FakeDeliverer("a"), FakeDeliverer("b")
    report = DeliveryChain([a, b]).deliver(MESSAGE)
    assert report.provider == "a"
    assert [x.state for x in report.attempts] == [AttemptState.SUCCEEDED, AttemptState.NOT_TRIED]
    assert b.calls == []


def test_falls_through_to_next_provider_on_failure():
    a, b = FakeDeliverer("a", fail=True), FakeDeliverer("b")
    report = DeliveryChain([a, b]).deliver(MESSAGE)
    assert report.provider == "b"
    assert [x.state for x in report.attempts] == [AttemptState.FAILED, AttemptState.SUCCEEDED]
    assert len(a.calls) == 1


def test_unconfigured_providers_are_skipped_without_a_call():
    a, b = FakeDeliverer("a", configured=False), FakeDeliverer("b")
    report = DeliveryChain([a, b]).deliver(MESSAGE)
    assert report.provider == "b"
    assert report.attempts[0].state == AttemptState.SKIPPED_UNCONFIGURED
    assert a.calls == []


def test_all_failed_or_skipped_raises():
    a, b = FakeDeliverer("a", fail=True), FakeDeliverer("b", configured=False)
    chain = DeliveryChain([a, b])
    report = chain.attempt(MESSAGE)
    assert not report.succeeded
    assert [x.state for x in report.attempts] == [AttemptState.FAILED, AttemptState.SKIPPED_UNCONFIGURED]
    with pytest.raises(DeliveryError):
        chain.deliver(MESSAGE)
    assert b.calls == []


def test_no_providers_raises():
    with pytest.raises(DeliveryError):
        DeliveryChain([]).deliver(MESSAGE)


def test_attempt_timeout_is_capped_by_remaining_deadline():
    clock = FakeClock()

    def slow():
        clock.now += 8.0

    a = FakeDeliverer("a", fail=True, on_send=slow)
    b = FakeDeliverer("b")
    report = DeliveryChain([a, b], attempt_timeout=5.0, deadline=10.0, clock=clock).deliver(MESSAGE)
    assert report.provider == "b"
    assert a.calls[0][1] == 5.0
    assert b.calls[0][1] == pytest.approx(2.0)


def test_deadline_marks_remaining_providers_failed():
    clock = FakeClock()

    def hang():
        clock.now += 30.0

    a = FakeDeliverer("a", fail=True, on_send=hang)
    b = FakeDeliverer("b")
    chain = DeliveryChain([a, b], attempt_timeout=5.0, deadline=12.0, clock=clock)
    report = chain.attempt(MESSAGE)
    assert b.calls == []
    assert report.attempts[1].state == AttemptState.FAILED
    assert report.attempts[1].error == "deadline_exceeded"


def test_otp_email_content():
    msg = otp_email("a@b.c", "482193", None)
    assert msg.subject == "Your AmritaCare OTP"
    assert "Hello User" in msg.body
    assert "482193" in msg.body
    assert "10 minutes" in msg.body


def test_sendgrid_non_2xx_falls_back_and_unconfigured_smtp_is_not_contacted():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(500, text="upstream error")

    def smtp_must_not_be_called(*args, **kwargs):
        raise AssertionError("SMTP contacted without credentials")

    sendgrid = SendGridDeliverer("key", "from@amrita.edu", transport=httpx.MockTransport(handler))
    smtp = SmtpDeliverer(user="", password="", smtp_factory=smtp_must_not_be_called,
                         smtp_ssl_factory=smtp_must_not_be_called)
    chain = DeliveryChain([sendgrid, smtp])

    with pytest.raises(DeliveryError):
        chain.send_code("a@bl.students.amrita.edu", "482193", "Asha")
    assert len(requests) == 1
    report = chain.attempt(otp_email("a@bl.students.amrita.edu", "482193"))
    assert [x.state for x in report.attempts] == [AttemptState.FAILED, AttemptState.SKIPPED_UNCONFIGURED]
