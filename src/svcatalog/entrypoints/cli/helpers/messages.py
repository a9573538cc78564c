"""Terminal message helpers for the catalog CLI.

Render user-visible status lines with emoji→ASCII fallbacks. Everything goes
to stderr so stdout stays machine-readable (``catalog list --json``).
"""

import click


def _supports_character(character: str) -> bool:
    """Return True if ``character`` can be encoded on stderr."""
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def _glyph(emoji: str, fallback: str) -> str:
    return emoji if _supports_character(emoji) else fallback


def caution_glyph() -> str:
    """Return "⚠️" where stderr can encode it, else "[!]"."""
    return _glyph("⚠️", "[!]")  # pragma: no mutate


def success_glyph() -> str:
    """Return "✅" where stderr can encode it, else "[OK]"."""
    return _glyph("✅", "[OK]")  # pragma: no mutate


def error_glyph() -> str:
    """Return "❌" where stderr can encode it, else "[X]"."""
    return _glyph("❌", "[X]")  # pragma: no mutate


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to **stderr**.

    Example:
        ``⚠️  This will modify your database.``
    """
    click.secho(f"{caution_glyph()}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a green, bold success line to **stderr**.

    Example:
        ``✅  Loaded 32 services.``
    """
    click.secho(f"{success_glyph()}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a red, bold error line to **stderr**.

    Example:
        ``❌  Cannot connect to database``
    """
    click.secho(f"{error_glyph()}  {msg}", fg="red", bold=True, err=True)
