from __future__ import annotations


class InputValidationError(ValueError):
    """Required interactive input was left empty."""

    exit_code = 1


class SigningKeyError(RuntimeError):
    """No secret key is available after generation."""

    exit_code = 1


class ConfigError(ValueError):
    """The setup config file is missing or unreadable."""

    exit_code = 1


def exit_code_for(exc: BaseException) -> int:
    code = getattr(exc, "exit_code", 1)
    try:
        return int(code) or 1
    except (TypeError, ValueError):
        return 1
