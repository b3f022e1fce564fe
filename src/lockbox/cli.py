"""Command line interface for Lockbox."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Callable

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from lockbox import __version__
from lockbox.container import api
from lockbox.container.codec import ContainerCodec
from lockbox.crypto.kdf import DEFAULT_ITERATIONS, resolve_pbkdf2_params
from lockbox.crypto.provider import DefaultCryptoProvider
from lockbox.errors import ConfigurationError, DecryptionFailed, InvalidInput, PlatformUnavailable
from lockbox.password_strength import WeakPasswordError, evaluate_password

EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_CRYPTO = 2
EXIT_FS = 3
EXIT_CORRUPT = 4
EXIT_PLATFORM = 5

ITERATIONS_ENVVAR = "LOCKBOX_PBKDF2_ITERATIONS"

console = Console()
err_console = Console(stderr=True)


def _package_version() -> str:
    try:
        return version("lockbox-encrypt")
    except PackageNotFoundError:
        return __version__


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("lockbox")
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=err_console, show_path=False))


def _prompt_password(password_opt: str | None, *, confirm: bool) -> str:
    if password_opt is not None:
        return password_opt
    return click.prompt("Password", hide_input=True, confirmation_prompt=confirm)


def _human_size(num: float) -> str:
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if num < 1024 or unit == "TB":
            return f"{num:.1f} {unit}" if unit != "B" else f"{int(num)} {unit}"
        num /= 1024
    return f"{num:.1f} TB"


def _build_codec(iterations: int | None) -> ContainerCodec:
    params = resolve_pbkdf2_params(iterations=iterations)
    return ContainerCodec(DefaultCryptoProvider(params))


def _handle_action(action: Callable[[], None]) -> int:
    try:
        action()
    except InvalidInput:
        console.print("[red]Error: input is too short to be an encrypted file[/red]")
        return EXIT_CORRUPT
    except DecryptionFailed as exc:
        console.print(f"[red]{exc}[/red]")
        return EXIT_CRYPTO
    except PlatformUnavailable as exc:
        console.print(f"[red]Crypto facilities unavailable:[/red] {exc}")
        return EXIT_PLATFORM
    except (ConfigurationError, WeakPasswordError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return EXIT_USAGE
    except FileExistsError as exc:
        console.print(f"[red]{exc}. Use --overwrite to replace.[/red]")
        return EXIT_FS
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/red] {exc}")
        return EXIT_FS
    except PermissionError as exc:
        console.print(f"[red]Permission denied:[/red] {exc}")
        return EXIT_FS
    except OSError as exc:  # noqa: BLE001
        console.print(f"[red]Filesystem error:[/red] {exc}")
        return EXIT_FS
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Unexpected error:[/red] {exc}")
        return EXIT_USAGE
    return EXIT_SUCCESS


_iterations_option = click.option(
    "--iterations",
    type=int,
    default=None,
    envvar=ITERATIONS_ENVVAR,
    show_envvar=True,
    help=f"PBKDF2 iteration count (default {DEFAULT_ITERATIONS}). Must match between encrypt and decrypt.",
)
_overwrite_option = click.option(
    "--overwrite/--no-overwrite",
    default=False,
    help="Overwrite output if it already exists.",
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=_package_version(), prog_name="Lockbox")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging on stderr.")
def cli(verbose: bool) -> None:
    """Password-protect files with AES-256-GCM containers."""
    _configure_logging(verbose)


@cli.command(
    help="Encrypt a file into a password-protected container.",
    epilog="Examples:\n  lockbox encrypt report.pdf\n  lockbox encrypt report.pdf report.bin --password pw",
)
@click.argument("input_path", type=click.Path(path_type=Path))
@click.argument("output_path", required=False, type=click.Path(path_type=Path))
@click.option("--password", "password_opt", help="Encryption password (will prompt if omitted).")
@_iterations_option
@_overwrite_option
@click.pass_context
def encrypt(
    ctx: click.Context,
    input_path: Path,
    output_path: Path | None,
    password_opt: str | None,
    iterations: int | None,
    overwrite: bool,
) -> None:
    password = _prompt_password(password_opt, confirm=True)
    target = output_path or api.encrypted_name(input_path)

    if password:
        strength = evaluate_password(password)
        if not strength.acceptable:
            hints = "; ".join(strength.feedback) or "consider a longer password"
            console.print(f"[yellow]Warning: {strength.level} password ({hints}).[/yellow]")

    code = _handle_action(
        lambda: api.encrypt_file(
            input_path, target, password, overwrite=overwrite, codec=_build_codec(iterations)
        ),
    )
    if code == EXIT_SUCCESS:
        console.print(f"[green]Encrypted to[/green] {target} (~{_human_size(target.stat().st_size)}).")
    ctx.exit(code)


@cli.command(
    help="Decrypt a container back into the original file.",
    epilog="Examples:\n  lockbox decrypt report.pdf.enc\n  lockbox decrypt report.bin restored.pdf --overwrite",
)
@click.argument("container", type=click.Path(path_type=Path))
@click.argument("output_path", required=False, type=click.Path(path_type=Path))
@click.option("--password", "password_opt", help="Decryption password (will prompt if omitted).")
@_iterations_option
@_overwrite_option
@click.pass_context
def decrypt(
    ctx: click.Context,
    container: Path,
    output_path: Path | None,
    password_opt: str | None,
    iterations: int | None,
    overwrite: bool,
) -> None:
    password = _prompt_password(password_opt, confirm=False)
    target = output_path or api.decrypted_name(container)

    code = _handle_action(
        lambda: api.decrypt_file(
            container, target, password, overwrite=overwrite, codec=_build_codec(iterations)
        ),
    )
    if code == EXIT_SUCCESS:
        console.print(f"[green]Decrypted to[/green] {target} ({api.guess_mime_type(target)}).")
    ctx.exit(code)


@cli.command(
    help="Show container fields without decrypting.",
    epilog="Example:\n  lockbox info report.pdf.enc",
)
@click.argument("container", type=click.Path(path_type=Path))
@click.pass_context
def info(ctx: click.Context, container: Path) -> None:
    def _run() -> None:
        layout = api.inspect_container(container.read_bytes())
        plaintext_len = layout.plaintext_len
        table = Table(show_header=False, box=None)
        table.add_row("Container size", _human_size(layout.total_len))
        table.add_row("Cipher", "AES-256-GCM")
        table.add_row("KDF", "PBKDF2-HMAC-SHA256")
        table.add_row("Iterations", f"not stored (default {DEFAULT_ITERATIONS})")
        table.add_row("Salt", layout.salt.hex())
        table.add_row("Nonce", layout.nonce.hex())
        table.add_row("Ciphertext+tag", f"{len(layout.ciphertext_and_tag)} bytes")
        table.add_row(
            "Plaintext size",
            f"{plaintext_len} bytes" if plaintext_len is not None else "[red]invalid (no room for tag)[/red]",
        )
        console.print("[bold]Lockbox container[/bold]")
        console.print(table)

    ctx.exit(_handle_action(_run))


def main(argv: list[str] | None = None) -> int:
    try:
        result = cli.main(args=argv, prog_name="lockbox", standalone_mode=False)
        return result if isinstance(result, int) else EXIT_SUCCESS
    except click.ClickException as exc:
        exc.show()
        return EXIT_USAGE
    except click.exceptions.Abort:
        return EXIT_USAGE
    except SystemExit as exc:  # noqa: TRY003
        code = exc.code if isinstance(exc.code, int) else EXIT_USAGE
        return code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
