from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys

from webdevpack.client import Client, WebDevPackError
from webdevpack.config import ClientConfig

log = logging.getLogger("webdevpack.cli")


def _print_json(obj: object) -> None:
    """Print JSON to stdout."""
    print(json.dumps(obj, indent=2, sort_keys=True, default=str))


def _print_saved(path: str) -> None:
    _print_json({"saved_to": os.path.abspath(path)})


def _text_arg(value: str) -> str:
    """Read text from stdin when the argument is `-`."""
    if value == "-":
        return sys.stdin.read()
    return value


def _client_config(args: argparse.Namespace) -> ClientConfig:
    """Resolve CLI flags, falling back to WDP_* environment variables."""
    env = ClientConfig.from_env()
    return ClientConfig(
        api_key=args.api_key or env.api_key,
        base_url=args.base_url or env.base_url,
    )


def _make_client(args: argparse.Namespace) -> Client:
    return Client(config=_client_config(args))


def run_command(args: argparse.Namespace) -> int:
    """Run one async command against the API.

    Security notes:
    - Client errors are printed without the API key.

    """

    async def _run() -> None:
        async with _make_client(args) as client:
            await args.func(client, args)

    log.debug("cli_command", extra={"cmd": args.cmd})
    try:
        asyncio.run(_run())
    except WebDevPackError as e:
        log.debug("cli_command_failed", extra={"cmd": args.cmd, "error": type(e).__name__})
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


async def cmd_transform_text(client: Client, args: argparse.Namespace) -> None:
    print(await client.transform_text(_text_arg(args.text), args.transform))


async def cmd_base64_encode(client: Client, args: argparse.Namespace) -> None:
    print(await client.base64_encode(_text_arg(args.text)))


async def cmd_base64_decode(client: Client, args: argparse.Namespace) -> None:
    print(await client.base64_decode(_text_arg(args.text)))


async def cmd_hash_text(client: Client, args: argparse.Namespace) -> None:
    print(await client.hash_text(_text_arg(args.text), args.algorithm))


async def cmd_encode_url(client: Client, args: argparse.Namespace) -> None:
    print(await client.encode_url(_text_arg(args.text)))


async def cmd_decode_url(client: Client, args: argparse.Namespace) -> None:
    print(await client.decode_url(_text_arg(args.text)))


async def cmd_encode_json(client: Client, args: argparse.Namespace) -> None:
    print(await client.encode_json(_text_arg(args.text)))


async def cmd_decode_json(client: Client, args: argparse.Namespace) -> None:
    print(await client.decode_json(_text_arg(args.text)))


async def cmd_whois(client: Client, args: argparse.Namespace) -> None:
    print(await client.domain_whois(args.domain))


async def cmd_optimize_image(client: Client, args: argparse.Namespace) -> None:
    await client.optimize_image(args.source, args.target, quality=args.quality)
    _print_saved(args.target)


async def cmd_convert_image(client: Client, args: argparse.Namespace) -> None:
    await client.convert_image(args.source, args.target, args.format, quality=args.quality)
    _print_saved(args.target)


async def cmd_ocr(client: Client, args: argparse.Namespace) -> None:
    print(await client.get_text_from_image(args.source, language=args.language))


async def cmd_qrcode(client: Client, args: argparse.Namespace) -> None:
    await client.generate_qr_code(_text_arg(args.text), args.target, args.size, args.format)
    _print_saved(args.target)


async def cmd_barcode(client: Client, args: argparse.Namespace) -> None:
    await client.generate_barcode(
        _text_arg(args.text), args.target, args.width, args.height, args.format
    )
    _print_saved(args.target)


async def cmd_minify_js(client: Client, args: argparse.Namespace) -> None:
    print(await client.minify_javascript(_text_arg(args.code)))


async def cmd_minify_js_file(client: Client, args: argparse.Namespace) -> None:
    await client.minify_javascript_file(args.source, args.target)
    _print_saved(args.target)


async def cmd_minify_css(client: Client, args: argparse.Namespace) -> None:
    print(await client.minify_css(_text_arg(args.code)))


async def cmd_minify_css_file(client: Client, args: argparse.Namespace) -> None:
    await client.minify_css_file(args.source, args.target)
    _print_saved(args.target)


async def cmd_password(client: Client, args: argparse.Namespace) -> None:
    print(
        await client.generate_password(
            args.length,
            include_uppercase=not args.no_uppercase,
            include_symbols=not args.no_symbols,
            include_numbers=not args.no_numbers,
        )
    )


async def cmd_keypair(client: Client, args: argparse.Namespace) -> None:
    kp = await client.generate_key_pair(args.bits)
    _print_json({"private_key": kp.private_key, "public_key": kp.public_key})


async def cmd_html_to_pdf(client: Client, args: argparse.Namespace) -> None:
    await client.convert_html_to_pdf(_text_arg(args.code), args.target)
    _print_saved(args.target)


async def cmd_html_file_to_pdf(client: Client, args: argparse.Namespace) -> None:
    await client.convert_html_file_to_pdf(args.source, args.target)
    _print_saved(args.target)


def _text_command(sub, name: str, help: str, func, dest: str = "text") -> argparse.ArgumentParser:
    p = sub.add_parser(name, help=help)
    p.add_argument(dest, help="Input text (use - to read stdin)")
    p.set_defaults(func=func)
    return p


def _file_command(sub, name: str, help: str, func) -> argparse.ArgumentParser:
    p = sub.add_parser(name, help=help)
    p.add_argument("source", help="Path to local source file")
    p.add_argument("target", help="Path to write the result to")
    p.set_defaults(func=func)
    return p


def register_commands(sub: argparse._SubParsersAction) -> None:
    """Register one subcommand per API operation."""

    tt = _text_command(sub, "transform-text", "Apply a text transform", cmd_transform_text)
    tt.add_argument("--transform", required=True, help="Transform name (e.g. uppercase)")

    _text_command(sub, "base64-encode", "Base64-encode text", cmd_base64_encode)
    _text_command(sub, "base64-decode", "Base64-decode text", cmd_base64_decode)

    ht = _text_command(sub, "hash-text", "Hash text", cmd_hash_text)
    ht.add_argument("--algorithm", default="sha256", help="Hash algorithm (default: sha256)")

    _text_command(sub, "encode-url", "URL-encode text", cmd_encode_url)
    _text_command(sub, "decode-url", "URL-decode text", cmd_decode_url)
    _text_command(sub, "encode-json", "JSON-encode text", cmd_encode_json)
    _text_command(sub, "decode-json", "JSON-decode text", cmd_decode_json)

    wh = sub.add_parser("whois", help="Domain WHOIS lookup")
    wh.add_argument("domain", help="Domain name")
    wh.set_defaults(func=cmd_whois)

    oi = _file_command(sub, "optimize-image", "Optimize an image", cmd_optimize_image)
    oi.add_argument("--quality", type=int, default=100, help="Quality 1-100 (default: 100)")

    ci = _file_command(sub, "convert-image", "Convert an image", cmd_convert_image)
    ci.add_argument("--format", required=True, help="Target format (e.g. webp)")
    ci.add_argument("--quality", type=int, default=100, help="Quality 1-100 (default: 100)")

    ocr = sub.add_parser("ocr", help="Extract text from an image")
    ocr.add_argument("source", help="Path to local image")
    ocr.add_argument("--language", default="eng", help="OCR language (default: eng)")
    ocr.set_defaults(func=cmd_ocr)

    qr = _text_command(sub, "qrcode", "Generate a QR code", cmd_qrcode)
    qr.add_argument("target", help="Path to write the image to")
    qr.add_argument("--size", type=int, default=300, help="Size in pixels")
    qr.add_argument("--format", default="png", help="Image format (default: png)")

    bc = _text_command(sub, "barcode", "Generate a barcode", cmd_barcode)
    bc.add_argument("target", help="Path to write the image to")
    bc.add_argument("--width", type=int, default=300, help="Width in pixels")
    bc.add_argument("--height", type=int, default=100, help="Height in pixels")
    bc.add_argument("--format", default="png", help="Image format (default: png)")

    _text_command(sub, "minify-js", "Minify JavaScript code", cmd_minify_js, dest="code")
    _file_command(sub, "minify-js-file", "Minify a JavaScript file", cmd_minify_js_file)
    _text_command(sub, "minify-css", "Minify CSS code", cmd_minify_css, dest="code")
    _file_command(sub, "minify-css-file", "Minify a CSS file", cmd_minify_css_file)

    pw = sub.add_parser("password", help="Generate a password")
    pw.add_argument("--length", type=int, default=16, help="Password length (default: 16)")
    pw.add_argument("--no-uppercase", action="store_true", help="Exclude uppercase letters")
    pw.add_argument("--no-symbols", action="store_true", help="Exclude symbols")
    pw.add_argument("--no-numbers", action="store_true", help="Exclude numbers")
    pw.set_defaults(func=cmd_password)

    kp = sub.add_parser("keypair", help="Generate a key pair")
    kp.add_argument("--bits", type=int, default=2048, help="Key size (default: 2048)")
    kp.set_defaults(func=cmd_keypair)

    hp = _text_command(sub, "html-to-pdf", "Convert HTML code to PDF", cmd_html_to_pdf, dest="code")
    hp.add_argument("target", help="Path to write the PDF to")

    _file_command(sub, "html-file-to-pdf", "Convert an HTML file to PDF", cmd_html_file_to_pdf)
