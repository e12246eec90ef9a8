import threading

from payledger.config import Settings
from payledger.services.events import EventBus, PaymentSucceeded
from payledger.services.notification_service import NotificationService, format_amount


class FakeSMTP:
    sent = []

    def __init__(self, host, port):
        self.host, self.port = host, port
        self.credentials = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def login(self, user, password):
        self.credentials = (user, password)

    def send_message(self, message):
        FakeSMTP.sent.append((self.credentials, message))


def mailer_settings(**overrides):
    values = dict(_env_file=None, EMAIL_USER="shop@example.com", EMAIL_PASS="abcd efgh ijkl mnop",
                  EMAIL_FROM_NAME="Shop")
    values.update(overrides)
    return Settings(**values)


def test_format_amount():
    assert format_amount(1234) == "₹1,234.00"
    assert format_amount(0.5) == "₹0.50"


def test_confirmation_email_contents(make_record):
    record = make_record(amount=499, user_email="asha@example.com", user_name="Asha <b>",
                         plan_name="Styles & Tones Package", plan_duration="Lifetime")
    message = NotificationService(mailer_settings()).compose_payment_email(record)

    assert message["To"] == "asha@example.com"
    assert message["Subject"] == "Payment Successful – Styles & Tones Package (₹499.00)"
    text = message.get_body(("plain",)).get_content()
    assert "Payment ID: pay_1" in text
    assert "Access: Lifetime" in text
    html = message.get_body(("html",)).get_content()
    assert "Asha &lt;b&gt;" in html


def test_send_strips_spaces_from_app_password(make_record):
    FakeSMTP.sent.clear()
    service = NotificationService(mailer_settings(), smtp_factory=FakeSMTP)

    service.on_payment_succeeded(PaymentSucceeded(make_record(user_email="asha@example.com")))

    assert len(FakeSMTP.sent) == 1
    credentials, message = FakeSMTP.sent[0]
    assert credentials == ("shop@example.com", "abcdefghijklmnop")
    assert message["To"] == "asha@example.com"


def test_unconfigured_mailer_skips_sending(make_record):
    FakeSMTP.sent.clear()
    service = NotificationService(Settings(_env_file=None), smtp_factory=FakeSMTP)

    service.on_payment_succeeded(PaymentSucceeded(make_record(user_email="asha@example.com")))
    assert FakeSMTP.sent == []


def test_record_without_email_is_skipped(make_record):
    FakeSMTP.sent.clear()
    service = NotificationService(mailer_settings(), smtp_factory=FakeSMTP)

    service.on_payment_succeeded(PaymentSucceeded(make_record(user_email="")))
    assert FakeSMTP.sent == []


def test_bus_runs_handlers_off_the_caller_thread(make_record):
    bus = EventBus()
    seen = []
    bus.subscribe(PaymentSucceeded, lambda event: seen.append(threading.current_thread().name))

    futures = bus.publish(PaymentSucceeded(make_record()))
    for future in futures:
        future.result(timeout=5)
    bus.shutdown()

    assert len(seen) == 1
    assert seen[0] != threading.current_thread().name


def test_bus_handler_failure_is_contained(make_record):
    bus = EventBus()
    calls = []

    def broken(event):
        raise RuntimeError("smtp down")

    bus.subscribe(PaymentSucceeded, broken)
    bus.subscribe(PaymentSucceeded, lambda event: calls.append(event.record.id))

    record = make_record()
    futures = bus.publish(PaymentSucceeded(record))
    bus.shutdown(wait=True)

    assert calls == [record.id]
    assert isinstance(futures[0].exception(), RuntimeError)


def test_unsubscribed_event_is_ignored():
    bus = EventBus()
    assert bus.publish(object()) == []
    bus.shutdown()
