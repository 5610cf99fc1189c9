from agendabot.infrastructure.whatsapp.webhook_verify import compute_twilio_signature, verify_twilio_signature

URL = "https://example.com/webhook"
PARAMS = {"From": "whatsapp:+5561999999999", "Body": "Oi", "To": "whatsapp:+14155238886"}


def test_signature_matches():
    signature = compute_twilio_signature(URL, PARAMS, "secret")

    assert verify_twilio_signature(URL, PARAMS, signature, "secret", "prod")


def test_signature_depends_on_params_not_order():
    reordered = dict(reversed(list(PARAMS.items())))

    assert compute_twilio_signature(URL, reordered, "secret") == compute_twilio_signature(URL, PARAMS, "secret")
    assert compute_twilio_signature(URL, {**PARAMS, "Body": "Olá"}, "secret") != compute_twilio_signature(
        URL, PARAMS, "secret"
    )


def test_wrong_signature_is_rejected():
    assert not verify_twilio_signature(URL, PARAMS, "bogus", "secret", "prod")


def test_missing_header_only_accepted_in_dev():
    assert verify_twilio_signature(URL, PARAMS, None, "secret", "dev")
    assert not verify_twilio_signature(URL, PARAMS, None, "secret", "prod")


def test_missing_token_is_rejected():
    assert not verify_twilio_signature(URL, PARAMS, "anything", None, "prod")
