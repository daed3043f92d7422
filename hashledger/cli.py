import json

import click

from .blocks import Block
from .chain import LedgerPage
from .config import get_package_version, get_settings
from .exceptions import HashLedgerError, ParseError
from .logging import configure_logging
from .metrics import start_metrics_server


def emit(ctx, payload, text=None):
    """Print ``payload`` as JSON with --json-output, otherwise ``text`` (or the payload)."""
    if ctx.obj.get("JSON_OUTPUT") or text is None:
        click.echo(json.dumps(payload, indent=ctx.obj.get("INDENT"), ensure_ascii=False))
    else:
        click.echo(text)


# Helper function for consistent error handling and output
def handle_ledger_call(ctx, func, *args, **kwargs):
    """
    Calls a ledger function, reporting any failure in the selected output format.
    """
    try:
        return func(*args, **kwargs)
    except HashLedgerError as e:
        error_info = {
            "status": "error",
            "error": type(e).__name__,
            "message": str(e),
        }
        if ctx.obj.get("JSON_OUTPUT"):
            click.echo(json.dumps(error_info, indent=2))
        else:
            click.echo(f"ERROR: {str(e)}", err=True)
        if ctx.obj.get("VERBOSE"):
            import traceback

            click.echo(traceback.format_exc(), err=True)
        ctx.exit(1)
    except Exception as e:  # Catch any other unexpected errors
        error_info = {
            "status": "error",
            "message": "An unexpected error occurred.",
            "details": str(e),
        }
        if ctx.obj.get("JSON_OUTPUT"):
            click.echo(json.dumps(error_info, indent=2))
        else:
            click.echo(f"UNEXPECTED ERROR: {str(e)}", err=True)
        if ctx.obj.get("VERBOSE"):
            import traceback

            click.echo(traceback.format_exc(), err=True)
        ctx.exit(1)


def read_page(page_file):
    try:
        text = page_file.read()
    except UnicodeDecodeError as e:
        raise ParseError(f"Page file is not UTF-8 text: {e}") from e
    return LedgerPage.from_json(text)


def load_page(ctx, page_file):
    return handle_ledger_call(ctx, read_page, page_file)


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--json-output", "-j", is_flag=True, help="Output results in JSON format.")
@click.version_option(get_package_version(), prog_name="hashledger")
@click.pass_context
def hashledger_cli(ctx, verbose, json_output):
    """Build and check hash-chained ledger pages.

    Pages are read from a file argument (or '-' for stdin) and written to stdout.
    """
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    if settings.metrics_enabled:
        start_metrics_server(settings.metrics_port, settings.metrics_addr)
    ctx.ensure_object(dict)
    ctx.obj["VERBOSE"] = verbose
    ctx.obj["JSON_OUTPUT"] = json_output
    ctx.obj["INDENT"] = settings.json_indent
    ctx.obj["SETTINGS"] = settings


@hashledger_cli.command("new")
@click.option("--genesis", default=None, help="Base64 genesis anchor. Defaults to HASHLEDGER_GENESIS_HASH.")
@click.pass_context
def new(ctx, genesis):
    """
    Print an empty ledger page.

    Example:

        hashledger-cli new --genesis MA== > page.json
    """
    page = LedgerPage(genesis or ctx.obj["SETTINGS"].genesis_hash)
    click.echo(page.to_json())


@hashledger_cli.command("append")
@click.argument("page_file", type=click.File("r", encoding="utf-8"))
@click.argument("payloads", nargs=-1, required=True)
@click.pass_context
def append(ctx, page_file, payloads):
    """
    Append one block per PAYLOAD and print the updated page.

    Example:

        hashledger-cli append page.json "Hello World" "Hello World Again"
    """
    page = load_page(ctx, page_file)
    for payload in payloads:
        handle_ledger_call(ctx, page.add_transaction, payload)
    click.echo(page.to_json())


@hashledger_cli.command("verify")
@click.argument("page_file", type=click.File("r", encoding="utf-8"))
@click.pass_context
def verify(ctx, page_file):
    """
    Verify every block hash and the chain linkage. Exits 1 on failure.
    """
    page = load_page(ctx, page_file)
    valid = page.verify()
    emit(
        ctx,
        {"status": "success", "valid": valid, "entries": len(page), "last_hash": page.last_hash},
        f"{'VALID' if valid else 'INVALID'}: {len(page)} entries",
    )
    if not valid:
        ctx.exit(1)


@hashledger_cli.command("show")
@click.argument("page_file", type=click.File("r", encoding="utf-8"))
@click.pass_context
def show(ctx, page_file):
    """
    List the entries of a page.
    """
    page = load_page(ctx, page_file)
    lines = [f"first_hash: {page.first_hash}"]
    lines.extend(f"{i}\t{block.hash}\t{block.transactions}" for i, block in enumerate(page))
    lines.append(f"last_hash: {page.last_hash}")
    emit(ctx, page.to_dict(), "\n".join(lines))


@hashledger_cli.command("hash")
@click.argument("parent_hash")
@click.argument("transactions")
@click.pass_context
def hash_block(ctx, parent_hash, transactions):
    """
    Print the block built from PARENT_HASH and TRANSACTIONS.

    Example:

        hashledger-cli hash MA== "Hello World"
    """
    block = handle_ledger_call(ctx, Block, parent_hash, transactions)
    click.echo(block.to_json())


@hashledger_cli.command("finalize")
@click.argument("page_file", type=click.File("r", encoding="utf-8"))
@click.pass_context
def finalize(ctx, page_file):
    """
    Print the page closed to further appends.
    """
    page = load_page(ctx, page_file)
    page.finalize()
    click.echo(page.to_json())


def main():
    hashledger_cli(obj={})


if __name__ == "__main__":
    main()
