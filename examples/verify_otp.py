"""
Command line demo for Yubico OTP verification.

Usage:
    # Install the package
    pip install -e .

    # Touch your YubiKey at the prompt, or pass the OTP as an argument
    export YUBICO_CLIENT_ID=12345
    export YUBICO_SECRET=base64secret=
    python examples/verify_otp.py
    python examples/verify_otp.py --sync cccccckdvvul...

Environment variables:
    YUBICO_CLIENT_ID   - Client id from https://upgrade.yubico.com/getapikey/
    YUBICO_SECRET      - API secret matching the client id
    YUBICO_SL          - Optional sync level (0-100, "fast" or "secure")
    YUBICO_TIMEOUT     - Optional server-side sync timeout in seconds
    YUBICO_API_SERVERS - Optional comma separated validation servers
"""

import argparse
import asyncio
import logging
import sys

from yubico_verifier import VerifierClient, YubicoVerifierError


def main() -> int:
    parser = argparse.ArgumentParser(description="Verify a YubiKey OTP")
    parser.add_argument("otp", nargs="?", help="OTP to verify (prompted if omitted)")
    parser.add_argument("--sync", action="store_true", help="Use the thread based client")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log protocol details")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    otp = args.otp or input("Touch your YubiKey: ").strip()

    try:
        client = VerifierClient.from_env()
        if args.sync:
            record = client.verify_sync(otp)
        else:
            record = asyncio.run(client.verify(otp))
    except YubicoVerifierError as e:
        print(f"Verification failed: {e}", file=sys.stderr)
        return 1

    print(f"OTP verified for key {record.public_id} (serial {record.serial_number})")
    print(f"  server time:     {record.server_time}")
    print(f"  session counter: {record.session_counter}")
    print(f"  session use:     {record.session_use}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
