#!/usr/bin/env python3
"""
Grug Proofs CLI

Command-line interface for verifying Grug Merkle proofs, inspecting proof
files and producing reference proofs from key-value pairs.

Byte string arguments (keys, values) are UTF-8 text by default; prefix them
with "0x" for hex or "b64:" for base64. Root hashes are "0x" hex or base64.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .api.verification_service import VerificationResult, VerificationService
from .config import Settings, setup_logging
from .errors import GrugProofError
from .merkle.hashing import digest_to_base64
from .merkle.node import InternalNode
from .merkle.proof import MembershipProof, Proof
from .merkle.tree import MerkleTree
from .models.proof_models import decode_proof, encode_proof
from .utils import bytes_to_hex, parse_bytes_arg, parse_hash_arg

# Configure rich console
console = Console()
logger = logging.getLogger(__name__)


def load_proof_file(proof_file: str) -> Dict[str, Any]:
    """Load a JSON proof file."""
    try:
        with open(proof_file, "r") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Failed to load proof from {proof_file}: {e}")


def _bytes_option(value: str, name: str) -> bytes:
    try:
        return parse_bytes_arg(value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint=name)


def _hash_option(value: str, name: str) -> bytes:
    try:
        return parse_hash_arg(value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint=name)


def _format_hash(h: Optional[bytes]) -> str:
    return bytes_to_hex(h) if h is not None else "(empty)"


def print_verification_result(result: VerificationResult, proof_type: str, format_output: str = "table"):
    """Print a verification result in various formats."""
    if format_output == "json":
        console.print_json(json.dumps({**result.to_dict(), "proof_type": proof_type}))
        return

    table = Table(title=f"{proof_type.title()} Verification")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Proof Type", proof_type)
    table.add_row("Valid", "✅ yes" if result.valid else "❌ no")
    if not result.valid:
        table.add_row("Error Type", str(result.error_type))
        table.add_row("Error Code", str(result.code))
        table.add_row("Error", str(result.error))

    console.print(table)


def print_proof(proof: Proof):
    """Print the structure of a proof as tables."""
    table = Table(title="Proof")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    if isinstance(proof, MembershipProof):
        table.add_row("Proof Type", "membership")
    else:
        table.add_row("Proof Type", "non-membership")
        if isinstance(proof.node, InternalNode):
            table.add_row("Node", "internal")
            table.add_row("Left Hash", _format_hash(proof.node.left_hash))
            table.add_row("Right Hash", _format_hash(proof.node.right_hash))
        else:
            table.add_row("Node", "leaf")
            table.add_row("Key Hash", _format_hash(proof.node.key_hash))
            table.add_row("Value Hash", _format_hash(proof.node.value_hash))
    table.add_row("Depth", str(len(proof.sibling_hashes)))
    console.print(table)

    if proof.sibling_hashes:
        siblings = Table(title="Sibling Hashes")
        siblings.add_column("Depth", style="cyan")
        siblings.add_column("Hash", style="yellow")
        for depth, sibling in enumerate(proof.sibling_hashes):
            siblings.add_row(str(depth), _format_hash(sibling))
        console.print(siblings)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, verbose: bool):
    """
    Grug Proofs CLI - Verify Merkle proofs of the Grug state tree.

    Proofs are JSON files as produced by Grug nodes. They are verified
    against a root hash you trust, e.g. from a light client.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command("verify-membership")
@click.option("--root", required=True, help="Trusted root hash (0x hex or base64)")
@click.option("--key", required=True, help="Key (text, 0x hex or b64:base64)")
@click.option("--value", required=True, help="Value (text, 0x hex or b64:base64)")
@click.option("--proof", "proof_file", required=True, type=click.Path(exists=True), help="Proof JSON file")
@click.option("--format", "format_output", type=click.Choice(["table", "json"]), default="table")
@click.pass_context
def verify_membership_cmd(ctx, root: str, key: str, value: str, proof_file: str, format_output: str):
    """Verify that KEY holds VALUE under ROOT."""
    result = VerificationService().verify_membership(
        _hash_option(root, "--root"),
        _bytes_option(key, "--key"),
        _bytes_option(value, "--value"),
        load_proof_file(proof_file),
    )
    print_verification_result(result, "membership", format_output)
    if not result.valid:
        ctx.exit(1)


@cli.command("verify-non-membership")
@click.option("--root", required=True, help="Trusted root hash (0x hex or base64)")
@click.option("--key", required=True, help="Key (text, 0x hex or b64:base64)")
@click.option("--proof", "proof_file", required=True, type=click.Path(exists=True), help="Proof JSON file")
@click.option("--format", "format_output", type=click.Choice(["table", "json"]), default="table")
@click.pass_context
def verify_non_membership_cmd(ctx, root: str, key: str, proof_file: str, format_output: str):
    """Verify that KEY is absent under ROOT."""
    result = VerificationService().verify_non_membership(
        _hash_option(root, "--root"),
        _bytes_option(key, "--key"),
        load_proof_file(proof_file),
    )
    print_verification_result(result, "non-membership", format_output)
    if not result.valid:
        ctx.exit(1)


@cli.command()
@click.argument("proof_file", type=click.Path(exists=True))
@click.pass_context
def inspect(ctx, proof_file: str):
    """Inspect a proof JSON file."""
    try:
        proof = decode_proof(load_proof_file(proof_file))
    except GrugProofError as e:
        console.print(f"[red]Invalid proof ({e.name}): {e}[/red]", style="bold")
        sys.exit(1)
    print_proof(proof)


@cli.command()
@click.argument("entries_file", type=click.Path(exists=True))
@click.argument("key")
def prove(entries_file: str, key: str):
    """
    Build a reference tree and print a proof for KEY.

    ENTRIES_FILE: JSON object mapping keys to values, both in the same
    notation as the --key option
    """
    try:
        with open(entries_file, "r") as f:
            entries = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Failed to load entries from {entries_file}: {e}")
    if not isinstance(entries, dict):
        raise click.ClickException("Entries file must hold a JSON object")

    tree = MerkleTree()
    for k, v in entries.items():
        tree.insert(_bytes_option(k, "ENTRIES_FILE"), _bytes_option(str(v), "ENTRIES_FILE"))

    try:
        proof = tree.prove(_bytes_option(key, "KEY"))
    except ValueError as e:
        raise click.ClickException(str(e))

    output = {
        "root": digest_to_base64(tree.root_hash),
        "key": key,
        "proof": encode_proof(proof),
    }
    print(json.dumps(output, indent=2))


@cli.command()
@click.option("--host", default=None, help="Host to bind to (default: GRUG_PROOFS_HOST)")
@click.option("--port", default=None, type=int, help="Port to bind to (default: GRUG_PROOFS_PORT)")
@click.option("--dev", is_flag=True, help="Enable development mode with auto-reload")
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int], dev: bool):
    """Start the REST API server."""
    from .api.rest_api import run_server

    settings = Settings.from_env()
    host = host or settings.host
    port = port or settings.port
    try:
        console.print(
            Panel(
                f"Starting Grug Proofs API Server\n\n"
                f"🚀 Server: http://{host}:{port}\n"
                f"📖 Docs: http://{host}:{port}/docs\n"
                f"❤️ Health: http://{host}:{port}/health\n\n"
                f"Press Ctrl+C to stop",
                title="API Server",
                border_style="green",
            )
        )

        run_server(host=host, port=port, dev=dev)

    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Server error: {e}[/red]", style="bold")
        if ctx.obj.get("verbose"):
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    cli()
