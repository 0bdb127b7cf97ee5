#!/usr/bin/env python3
"""
Basic usage examples for the APIG signing client.

This script shows how to sign a request for the API gateway and how to
query the exchange-rate endpoint. Credentials are read from the
APIG_ACCESS_KEY, APIG_SECRET_KEY and APIG_EXCHANGE_RATE_URL environment
variables.
"""

import logging
import sys

import requests

from apig_client import (
    APIGClientError,
    ExchangeRateClient,
    Signer,
    SignerAuth,
    config_from_env,
)


def main():
    """Run basic usage examples."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    print("=== APIG Signing Client Basic Usage Examples ===\n")

    try:
        config = config_from_env()
    except APIGClientError as e:
        print(f"   ✗ {e}")
        return 1

    # Example 1: Sign a prepared request by hand
    print("1. Signing a request...")
    signer = Signer(config['access_key'], config['secret_key'])
    request = requests.Request(
        "GET",
        config['exchange_rate_url'],
        params={"b": "2", "a": "1"},
        headers={"Content-Type": "application/json"},
    ).prepare()
    signer.sign(request)
    print(f"   URL: {request.url}")
    print(f"   X-Sdk-Date: {request.headers['X-Sdk-Date']}")
    print(f"   Authorization: {request.headers['Authorization']}\n")

    # Example 2: Let requests sign through the auth hook
    print("2. Preparing a request with SignerAuth...")
    prepared = requests.Request(
        "POST", config['exchange_rate_url'], data={"money": "1"}, auth=SignerAuth(signer)
    ).prepare()
    print(f"   Signed headers: {prepared.headers['Authorization'].split(', ')[1]}\n")

    # Example 3: Query an exchange rate
    print("3. Querying CNY -> USD...")
    with ExchangeRateClient(**config) as client:
        try:
            item = client.query_exchange_rate("CNY", "USD")
            print(f"   ✓ 1 {item.from_name} = {item.exchange} {item.to_name} ({item.updatetime})")
        except APIGClientError as e:
            print(f"   ✗ Query failed: {e}")
            return 1

    print("\n=== Examples completed ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
