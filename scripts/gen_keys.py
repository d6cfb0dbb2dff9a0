#!/usr/bin/env python3
"""
Generate an Asymmetric Key Pair

Creates an RSA or Ed25519 key pair and stores both halves as PEM files.
Existing files are never overwritten.

Defaults can be set in the environment or a .env file:
    CRYPTBOX_KEY_DIR    output directory (default: keys)
    CRYPTBOX_RSA_BITS   RSA modulus size (default: 2048)

Usage:
    python scripts/gen_keys.py --algorithm rsa --bits 4096 --name server
    python scripts/gen_keys.py --algorithm ed25519 --name signer
"""

import argparse
import os

from dotenv import load_dotenv

from cryptbox.crypto import ed25519, rsa, x509
from cryptbox.storage import with_key_encode_private, with_key_encode_public

load_dotenv()

PRIVATE_ENCODERS = {
    "pkcs1": x509.encode_pkcs1_private_key,
    "pkcs8": x509.encode_pkcs8_private_key,
}
PUBLIC_ENCODERS = {
    "pkcs1": x509.encode_pkcs1_public_key,
    "pkix": x509.encode_pkix_public_key,
}


def generate_key_pair(
    algorithm: str,
    name: str,
    bits: int = 2048,
    private_format: str = "pkcs8",
    public_format: str = "pkix",
    output_dir: str = "keys",
):
    """
    Generate a key pair and store it under output_dir.

    Args:
        algorithm: "rsa" or "ed25519"
        name: Base file name; writes <name>_key.pem and <name>_pub.pem
        bits: RSA modulus size (ignored for Ed25519)
        private_format: "pkcs1" (RSA only) or "pkcs8"
        public_format: "pkcs1" (RSA only) or "pkix"
        output_dir: Directory to save keys

    Returns:
        Tuple of (private_key_path, public_key_path)
    """
    os.makedirs(output_dir, exist_ok=True)

    if algorithm == "rsa":
        print(f"[*] Generating RSA key pair ({bits} bits)...")
        module = rsa
        private_key, public_key = rsa.generate_keys(bits)
    else:
        print("[*] Generating Ed25519 key pair...")
        module = ed25519
        private_key, public_key = ed25519.generate_keys()

    opts = (
        with_key_encode_private(PRIVATE_ENCODERS[private_format]),
        with_key_encode_public(PUBLIC_ENCODERS[public_format]),
    )

    key_path = os.path.join(output_dir, f"{name}_key.pem")
    module.store_private_key(key_path, private_key, *opts)
    print(f"[+] Private key ({private_format}) saved to: {key_path}")

    pub_path = os.path.join(output_dir, f"{name}_pub.pem")
    module.store_public_key(pub_path, public_key, *opts)
    print(f"[+] Public key ({public_format}) saved to: {pub_path}")

    print(f"\n[✓] {algorithm} key pair '{name}' created successfully!")
    return key_path, pub_path


def main():
    parser = argparse.ArgumentParser(
        description="Generate an RSA or Ed25519 key pair as PEM files"
    )
    parser.add_argument(
        "--algorithm",
        choices=["rsa", "ed25519"],
        default="rsa",
        help="Key algorithm (default: rsa)"
    )
    parser.add_argument(
        "--name",
        required=True,
        help="Base name for the key files"
    )
    parser.add_argument(
        "--bits",
        type=int,
        default=int(os.getenv("CRYPTBOX_RSA_BITS", 2048)),
        help="RSA modulus size in bits (default: 2048)"
    )
    parser.add_argument(
        "--private-format",
        choices=sorted(PRIVATE_ENCODERS),
        default="pkcs8",
        help="Private key format (default: pkcs8)"
    )
    parser.add_argument(
        "--public-format",
        choices=sorted(PUBLIC_ENCODERS),
        default="pkix",
        help="Public key format (default: pkix)"
    )
    parser.add_argument(
        "--output",
        default=os.getenv("CRYPTBOX_KEY_DIR", "keys"),
        help="Output directory for keys (default: keys)"
    )

    args = parser.parse_args()

    try:
        generate_key_pair(
            algorithm=args.algorithm,
            name=args.name,
            bits=args.bits,
            private_format=args.private_format,
            public_format=args.public_format,
            output_dir=args.output,
        )
    except FileExistsError as e:
        parser.exit(1, f"[!] Refusing to overwrite existing key: {e.filename}\n")


if __name__ == "__main__":
    main()
