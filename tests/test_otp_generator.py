from amritacare.services.auth.otp_generator import OTP_TTL_MS, generate_otp, now_ms


def test_generate_otp_is_six_digits_without_leading_zero():
    for _ in range(500):
        otp = generate_otp(0)
        assert len(otp.code) == 6
        assert otp.code.isdigit()
        assert otp.code[0] != "0"
        assert 100000 <= int(otp.code) <= 999999


def test_generate_otp_expires_ten_minutes_after_issuance():
    t0 = 1700000000000
    assert OTP_TTL_MS == 600000
    assert generate_otp(t0).expiry == t0 + 600000


def test_now_ms_is_milliseconds():
    assert now_ms() > 1_600_000_000_000
