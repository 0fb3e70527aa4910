#!/usr/bin/env python3
"""
azura-ssl command line

    azura-ssl sign-ca [filename]
    azura-ssl sign-server <filename> --ca ca.crt --cakey ca.key [--san]
    azura-ssl sign-client <filename> --ca ca.crt --cakey ca.key [--name "Jane Doe"]

Equivalent openssl commands for sign-client:
    openssl req -newkey rsa:<bits> -nodes -keyout <filename>.key -out <filename>.csr
    openssl x509 -req -in <filename>.csr -CA <CAPath> -CAkey <CAKeyPath> -out <filename>.crt
    openssl pkcs12 -export -in <filename>.crt -inkey <filename>.key -certfile <CAPath> -out <filename>.p12
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__, config, prompts, utils
from .certificate_builder import CertificateBuilder
from .dn_parser import parse_dn
from .errors import AzuraSSLError
from .issuer import CertificateIssuer, IssuedCertificate, artifact_base
from .keygen import KeyGenerator
from .san import build_san


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-b", "--bits", type=int, default=config.DEFAULT_KEY_SIZE,
                        help=f"RSA key size (default: {config.DEFAULT_KEY_SIZE})")
    parser.add_argument("-s", "--subj", default="",
                        help='set request subjects (format: "/t0=v0/t1=v1")')


def _add_ca_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--ca", dest="ca_path", type=Path,
                        help="CA certificate used for signing")
    parser.add_argument("--cakey", dest="cakey_path", type=Path,
                        help="CA private key used for signing")
    parser.add_argument("--cakey-passphrase", default=None,
                        help="passphrase of the CA private key (prompted when omitted)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="azura-ssl",
        description="Generate self-signed CA, server and client certificates."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="show debug logs")
    parser.add_argument("-o", "--out-dir", type=Path, default=Path("."),
                        help="directory for relative output filenames (default: current directory)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    sign_ca = subparsers.add_parser("sign-ca", help="generate self-signed CA certificate")
    sign_ca.add_argument("filename", nargs="?", default=config.DEFAULT_CA_FILENAME)
    sign_ca.add_argument("--passphrase", default=None,
                         help="passphrase encrypting the CA key (prompted when omitted)")
    _add_common_options(sign_ca)
    sign_ca.set_defaults(handler=cmd_sign_ca)

    sign_server = subparsers.add_parser("sign-server", help="generate CA-signed server certificate")
    sign_server.add_argument("filename")
    sign_server.add_argument("--san", action="store_true",
                             help='add a "subjectAltName" extension')
    sign_server.add_argument("--uris", default=None,
                             help='alternative URIs, implies --san (e.g. "a.com, b.com")')
    sign_server.add_argument("--ips", default=None,
                             help='alternative IPs, implies --san (e.g. "127.0.0.1")')
    _add_ca_options(sign_server)
    _add_common_options(sign_server)
    sign_server.set_defaults(handler=cmd_sign_server)

    sign_client = subparsers.add_parser("sign-client", help="generate CA-signed client certificate")
    sign_client.add_argument("filename")
    sign_client.add_argument("--name", dest="friendly_name", default=None,
                             help='"friendly name" stored in the PKCS#12 archive')
    sign_client.add_argument("--passphrase", default=None,
                             help="PKCS#12 export passphrase (prompted when omitted)")
    _add_ca_options(sign_client)
    _add_common_options(sign_client)
    sign_client.set_defaults(handler=cmd_sign_client)

    return parser


# ============================================
# 🎯 COMMANDS
# ============================================

def _make_issuer() -> CertificateIssuer:
    return CertificateIssuer(builder=CertificateBuilder(KeyGenerator(show_progress=True)))


def _report(title: str, issued: IssuedCertificate) -> None:
    utils.print_success(title)
    for path in issued.paths:
        utils.console.print(f"  [green]{path}[/green]")


def cmd_sign_ca(args: argparse.Namespace) -> IssuedCertificate:
    predefined = parse_dn(args.subj)

    if args.passphrase is None:
        utils.print_info("Passphrase encrypting the CA private key (leave blank for none)")
        passphrase = prompts.ask_passphrase()
    else:
        passphrase = args.passphrase

    subjects = prompts.ask_subjects(predefined)

    issued = _make_issuer().create_ca(
        base_path=artifact_base(args.filename, args.out_dir),
        subject=subjects,
        passphrase=passphrase,
        key_bits=args.bits
    )
    _report("CA certificate created:", issued)
    return issued


def cmd_sign_server(args: argparse.Namespace) -> IssuedCertificate:
    predefined = parse_dn(args.subj)

    ca_key = prompts.load_ca_private_key(args.cakey_path, args.cakey_passphrase)
    ca_cert = prompts.load_ca_certificate(args.ca_path)
    subjects = prompts.ask_subjects(predefined)

    if args.uris is not None or args.ips is not None:
        san = build_san(args.uris or "", args.ips or "")
    elif args.san:
        san = prompts.ask_san()
    else:
        san = ()

    issued = _make_issuer().issue_server(
        base_path=artifact_base(args.filename, args.out_dir),
        subject=subjects,
        ca_key=ca_key,
        ca_cert=ca_cert,
        san=san,
        key_bits=args.bits
    )
    _report("Server certificate created:", issued)
    return issued


def cmd_sign_client(args: argparse.Namespace) -> IssuedCertificate:
    predefined = parse_dn(args.subj)

    ca_key = prompts.load_ca_private_key(args.cakey_path, args.cakey_passphrase)
    ca_cert = prompts.load_ca_certificate(args.ca_path)
    subjects = prompts.ask_subjects(predefined)

    if args.passphrase is None:
        utils.print_info("Please provide a password to encrypt the PKCS#12 archive file.")
        passphrase = prompts.ask_passphrase()
    else:
        passphrase = args.passphrase

    issued = _make_issuer().issue_client(
        base_path=artifact_base(args.filename, args.out_dir),
        subject=subjects,
        ca_key=ca_key,
        ca_cert=ca_cert,
        export_passphrase=passphrase,
        friendly_name=args.friendly_name,
        key_bits=args.bits
    )
    _report("Client certificate created:", issued)
    return issued


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point of the azura-ssl console script

    Returns:
        int: Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    utils.setup_logging("DEBUG" if args.verbose else None)

    try:
        args.handler(args)
    except AzuraSSLError as exc:
        utils.print_error(str(exc))
        return 1
    except KeyboardInterrupt:
        utils.print_warning("Aborted")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
