#!/usr/bin/env python3
"""
Example: Upload a token image and its metadata to Arweave

Prices each upload, tops up the Irys balance from the funding account when
short, uploads, and waits until the object is publicly reachable.

Run this example:
    FUNDING_KEY=<base58 secret key> python examples/upload_token_metadata.py logo.png
"""

import asyncio
import mimetypes
import os
import sys
from pathlib import Path

from delegate_framework import ArweaveClient, ArweaveConfig, configure_logging


async def main(image_path: Path) -> int:
    configure_logging("INFO")

    client = await ArweaveClient.create(ArweaveConfig(
        private_key=os.environ["FUNDING_KEY"],
        network=os.environ.get("SOLANA_NETWORK", "devnet"),
    ))
    print(f"Funding account: {client.address}")
    print(f"Storage nodes:   {', '.join(client.node_urls)}")

    image = image_path.read_bytes()
    cost = await client.get_upload_cost(len(image))
    print(f"Image upload cost: {cost.cost} lamports for {cost.data_size} bytes")

    content_type = mimetypes.guess_type(image_path.name)[0] or "application/octet-stream"
    image_result = await client.upload_image(image, content_type)
    if not image_result.success:
        print(f"Image upload failed: {image_result.error}")
        return 1
    print(f"Image: {image_result.uri}")

    metadata_result = await client.upload_metadata({
        "name": "Delegate Token",
        "symbol": "DLGT",
        "description": "Example token",
        "image": image_result.uri,
        "properties": {
            "files": [{"uri": image_result.uri, "type": content_type}],
        },
    })
    if not metadata_result.success:
        print(f"Metadata upload failed: {metadata_result.error}")
        return 1

    print(f"Metadata: {metadata_result.uri}")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(main(Path(sys.argv[1]))))
