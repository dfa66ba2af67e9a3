"""
Example script reading chain time, epoch and token lists through the facade.

Uses the public mainnet endpoints; set SOLANA_RPC_URL to use another RPC node.

Usage:
    python examples/chain_state.py
"""

import os

from raydium_facade import RaydiumFacade


def main() -> None:
    """Print chain time, epoch and token list sizes, then show cache hits."""
    print("Loading Raydium facade")
    print("=" * 50)

    with RaydiumFacade.load(rpc_url=os.environ.get("SOLANA_RPC_URL"), skip_availability_check=False) as facade:
        print(f"Chain time offset: {facade.get_chain_time_offset()} ms")
        print(f"Chain time:        {facade.get_current_chain_time()} ms")

        try:
            epoch = facade.get_epoch_info()
            print(f"Epoch:             {epoch.epoch} (slot {epoch.slot_index}/{epoch.slots_in_epoch})")
        except Exception as e:
            print(f"✗ Epoch unavailable: {e}")

        print(f"Raydium tokens:    {len(facade.get_token_list_v3().mint_list)}")
        print(f"External tokens:   {len(facade.get_external_token_list())}")
        print(f"Catalog size:      {len(facade.token.token_map)}")
        print(f"Availability:      {facade.get_availability().to_wire() or 'unknown'}")

        # Second reads are served from the cache
        facade.get_token_list_v3()
        print("✓ Token list served from cache")


if __name__ == "__main__":
    main()
