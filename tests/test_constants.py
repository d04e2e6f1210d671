from ircstream.constants import (
    IRC_DEFAULT_PORT,
    IRC_DEFAULT_TLS_PORT,
    IRC_MAX_LINE_LENGTH,
    IRC_RFC_LINE_LENGTH,
    _get_env_float,
    _get_env_int,
)


def test_get_env_int_valid_positive_integer(monkeypatch):
    """Test parsing a valid positive integer from environment variable."""
    monkeypatch.setenv("TEST_VAR", "123")
    assert _get_env_int("TEST_VAR", 999) == 123


def test_get_env_int_valid_negative_integer(monkeypatch):
    """Test parsing a valid negative integer from environment variable."""
    monkeypatch.setenv("TEST_VAR", "-456")
    assert _get_env_int("TEST_VAR", 999) == -456


def test_get_env_int_invalid_string(monkeypatch, capsys):
    """Test handling of invalid string value in environment variable."""
    monkeypatch.setenv("TEST_VAR", "abc")
    assert _get_env_int("TEST_VAR", 999) == 999
    assert "Invalid integer value for TEST_VAR" in capsys.readouterr().out


def test_get_env_int_unset(monkeypatch):
    """Test fallback when the variable is not set."""
    monkeypatch.delenv("TEST_VAR", raising=False)
    assert _get_env_int("TEST_VAR", 999) == 999


def test_get_env_int_float_string(monkeypatch):
    """Test handling of float string value in environment variable."""
    monkeypatch.setenv("TEST_VAR", "3.14")
    assert _get_env_int("TEST_VAR", 999) == 999


def test_get_env_float_valid(monkeypatch):
    """Test parsing a float from environment variable."""
    monkeypatch.setenv("TEST_VAR", "2.5")
    assert _get_env_float("TEST_VAR", 1.0) == 2.5


def test_get_env_float_invalid(monkeypatch):
    """Test handling of invalid float value in environment variable."""
    monkeypatch.setenv("TEST_VAR", "soon")
    assert _get_env_float("TEST_VAR", 1.0) == 1.0


def test_defaults_are_sane():
    assert IRC_DEFAULT_PORT == 6667
    assert IRC_DEFAULT_TLS_PORT == 6697
    assert IRC_MAX_LINE_LENGTH >= IRC_RFC_LINE_LENGTH == 512
