"""
Environment Configuration Examples.

Demonstrates loading configuration from .env files and environment variables.
"""

import os

from transfer_client import TransferClient, load_from_env


def example_1_load_from_default_env():
    """Example 1: Load from .env file."""
    print("\n" + "=" * 60)
    print("EXAMPLE 1: Load from .env")
    print("=" * 60 + "\n")

    with open('.env', 'w') as f:
        f.write("TRANSFER_CLIENT_BASE_URL=https://httpbin.org\n")
        f.write("TRANSFER_CLIENT_TIMEOUT=10\n")
        f.write('TRANSFER_CLIENT_HEADERS=["Accept: application/json"]\n')
        f.write("TRANSFER_CLIENT_LOG_LEVEL=INFO\n")
        f.write("TRANSFER_CLIENT_LOG_FORMAT=json\n")

    try:
        config = load_from_env()
        print(f"base_url={config.base_url} timeout={config.defaults.timeout} headers={config.headers}")

        result = TransferClient(config=config).simple_get("/get")
        print(f"Response status: {result.status_code}\n")
    finally:
        os.remove('.env')


def example_2_restricted_mode():
    """Example 2: Restricted mode disables default redirect following."""
    print("\n" + "=" * 60)
    print("EXAMPLE 2: Restricted mode")
    print("=" * 60 + "\n")

    config = load_from_env(base_url="https://httpbin.org", restricted_mode=True)
    result = TransferClient(config=config).simple_get("/redirect/1")

    print(f"Status without following: {result.status_code}\n")


if __name__ == "__main__":
    example_1_load_from_default_env()
    example_2_restricted_mode()
