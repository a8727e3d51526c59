from __future__ import annotations

import sys
from typing import List, Optional

import typer
from loguru import logger

from cipherscope.classical import register_all
from cipherscope.core.config import Settings, settings
from cipherscope.core.features import analyze_text
from cipherscope.core.registry import (
    best_identification,
    decrypt_known,
    encrypt_known,
    get_plugin,
    identify_all,
    list_plugins,
)
from cipherscope.core.utils import alpha_count

app = typer.Typer(help="CipherScope CLI: statistical cryptanalysis of Caesar and Vigenere ciphers.")


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format="<level>{level: <8}</level> | {message}")


@app.callback()
def _init(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override CIPHERSCOPE_LOG_LEVEL (e.g. DEBUG)."),
):
    if log_level:
        _configure_logging(log_level)
    # Register plugins exactly once per CLI run
    register_all(settings)


@app.command()
def plugins():
    """List all registered cipher plugins."""
    for name in list_plugins():
        typer.echo(name)


@app.command()
def analyze(
    text: str,
    iocmax: int = typer.Option(20, help="Largest key length for Kasiski / IC periodicity scans."),
):
    """Show text statistics, IC and key-length estimates."""
    info = analyze_text(text, max_key_len=iocmax)
    for k, v in info.items():
        typer.echo(f"{k}: {v}")


@app.command()
def decrypt(
    cipher: str = typer.Option(..., "--cipher", "-c", help="Cipher plugin name (caesar, vigenere)."),
    key: Optional[str] = typer.Option(None, "--key", "-k", help="Key material for the cipher."),
    text: str = typer.Argument(..., help="Ciphertext to decrypt."),
):
    """Decrypt when you already know the cipher type and have the key."""
    try:
        pt = decrypt_known(cipher, text, key)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    typer.echo(pt)


@app.command()
def encrypt(
    cipher: str = typer.Option(..., "--cipher", "-c", help="Cipher plugin name (caesar, vigenere)."),
    key: Optional[str] = typer.Option(None, "--key", "-k", help="Key material for the cipher."),
    text: str = typer.Argument(..., help="Plaintext to encrypt."),
):
    """Encrypt with a known key (handy for building test ciphertexts)."""
    try:
        ct = encrypt_known(cipher, text, key)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    typer.echo(ct)


def _validated_include(cipher: Optional[List[str]]) -> Optional[set[str]]:
    include = None if not cipher else {c.lower().strip() for c in cipher}

    # Validate filter names so it can't silently run the wrong thing
    if include is not None:
        available = set(list_plugins())
        unknown = sorted(include - available)
        if unknown:
            raise typer.BadParameter(
                f"Unknown cipher(s): {', '.join(unknown)}. Available: {', '.join(sorted(available))}"
            )
    return include


def _direction(lower_is_better: bool) -> str:
    return "(Lower is better)" if lower_is_better else "(Higher is better)"


def _run_identification(text: str, include: Optional[set[str]]) -> bool:
    typer.echo("--- Identifying Cipher ---")
    results = identify_all(text, include=include)
    for r in results:
        typer.echo(
            f"  -> {r.cipher_name}  score={r.confidence:.4f} {_direction(r.lower_is_better)}"
            f"  params: {r.description or 'N/A'}"
        )

    if not results:
        typer.echo("Inconclusive: no identifier recognised this text.")
        return False

    best = best_identification(results)
    if best is not None:
        typer.echo(f"Tentative best guess: {best.cipher_name} (score {best.confidence:.4f})")
    return True


def _run_decryption(text: str, include: Optional[set[str]], top: int) -> bool:
    typer.echo("\n--- Attempting Decryption ---")
    n_letters = alpha_count(text)
    found_any = False

    for name in sorted(include) if include is not None else list_plugins():
        plugin = get_plugin(name)
        required = plugin.min_crack_length()
        if n_letters < required:
            typer.echo(f"Skipping {name}: {n_letters} letters is below the configured minimum of {required}.")
            continue

        attempts = plugin.crack(text)
        if not attempts:
            typer.echo(f"Inconclusive: no decryption found for {name}.")
            continue

        found_any = True
        typer.echo(f"Top {name} results {_direction(attempts[0].lower_is_better)}:")
        for i, r in enumerate(attempts[:top], start=1):
            typer.echo(f"#{i}  key={r.key}  score={r.score:.4f}")
            typer.echo(r.plaintext)
            typer.echo("-" * 60)
        if len(attempts) > top:
            typer.echo(f"  ... {len(attempts) - top} more {name} candidates")

    return found_any


@app.command()
def identify(
    text: str = typer.Argument(...),
    cipher: Optional[List[str]] = typer.Option(None, "--cipher", "-c", help="Limit to specific plugin(s)."),
):
    """Run the identifiers only and print a best guess."""
    include = _validated_include(cipher)
    typer.echo(f"Alphabetic length: {alpha_count(text)}")
    _run_identification(text, include)


def _run_pass(cfg: Settings, text: str, include: Optional[set[str]], top: int) -> bool:
    register_all(cfg)
    identified = _run_identification(text, include)
    decrypted = _run_decryption(text, include, top)
    return identified or decrypted


@app.command()
def crack(
    text: str = typer.Argument(...),
    top: int = typer.Option(5, "--top", "-t"),
    cipher: Optional[List[str]] = typer.Option(
        None,
        "--cipher",
        "-c",
        help="Limit to specific plugin(s). Can repeat: -c caesar -c vigenere",
    ),
    min_id_len: Optional[int] = typer.Option(None, "--min-id-len", help="Vigenere identification minimum letters."),
    min_dec_len: Optional[int] = typer.Option(None, "--min-dec-len", help="Vigenere decryption minimum letters."),
    retry: bool = typer.Option(True, "--retry/--no-retry", help="Offer relaxed thresholds if nothing is found."),
):
    """Identify the cipher and rank candidate decryptions."""
    include = _validated_include(cipher)

    try:
        cfg = settings.with_overrides(VIGENERE_MIN_ID_LEN=min_id_len, VIGENERE_MIN_DEC_LEN=min_dec_len)
    except ValueError as e:
        raise typer.BadParameter(str(e))

    typer.echo(f"Alphabetic length: {alpha_count(text)}")
    if _run_pass(cfg, text, include, top):
        return

    typer.echo("\nNo results with the current settings. Short ciphertexts often need lower minimums.")
    if not retry or not typer.confirm("Try again with custom minimum lengths?", default=False):
        raise typer.Exit(code=0)

    try:
        relaxed = cfg.with_overrides(
            VIGENERE_MIN_ID_LEN=typer.prompt("Minimum length for Vigenere identification", default=cfg.VIGENERE_MIN_ID_LEN, type=int),
            VIGENERE_MIN_DEC_LEN=typer.prompt("Minimum length for Vigenere decryption", default=cfg.VIGENERE_MIN_DEC_LEN, type=int),
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))
    if not _run_pass(relaxed, text, include, top):
        typer.echo("\nAnalysis with custom settings was also inconclusive.")


def main():
    _configure_logging(settings.LOG_LEVEL)
    app()


if __name__ == "__main__":
    main()
